"""
Setup file for the Interview Prep package.
"""
from setuptools import setup, find_packages

setup(
    name="interview_prep",
    version="0.1.0",
    packages=find_packages(include=["interview_prep", "interview_prep.*"]),
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.2",
        "python-dotenv>=1.0.0",
        "motor>=3.3.0",
        "pymongo>=4.6.0",
        "aiohttp>=3.9.0",
        "slowapi>=0.1.9",
        "python-multipart>=0.0.9",
        "pymupdf>=1.23.0",
        "click>=8.1.0",
        "aioconsole>=0.7.0",
        "tenacity>=8.2.0",
        "python-docx>=1.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "interview-prep=interview_prep.cli:main",
        ],
    },
    python_requires=">=3.9",
    author="Interview Prep Team",
    author_email="your.email@example.com",
    description="AI-generated interview preparation plans and live mock interview sessions",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
