from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure
import logging
from .config import get_db_config

logger = logging.getLogger(__name__)


def get_mongodb_client(uri: Optional[str] = None) -> AsyncIOMotorClient:
    """Get an async MongoDB client with proper connection settings."""
    db_config = get_db_config()
    uri = uri or db_config.get("uri")
    options = db_config["options"]

    # tz_aware keeps stored datetimes comparable with utc_now()
    return AsyncIOMotorClient(
        uri,
        tz_aware=True,
        serverSelectionTimeoutMS=options["serverSelectionTimeoutMS"],
        socketTimeoutMS=options["socketTimeoutMS"],
        connectTimeoutMS=options["connectTimeoutMS"],
    )


async def connect_database(client: AsyncIOMotorClient, database: Optional[str] = None) -> AsyncIOMotorDatabase:
    """Ping the server and return the configured database."""
    try:
        await client.admin.command("ping")
        logger.info("Successfully connected to MongoDB")
    except ConnectionFailure as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise
    return client[database or get_db_config()["database"]]
