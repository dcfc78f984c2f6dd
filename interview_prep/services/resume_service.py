"""
Resume intake for resume-based interviews.

Uploaded files are stored in a local directory so a URL can be handed back,
and their text is extracted for the opening prompt.
"""
import asyncio
import io
import logging
import os
import uuid
import zipfile
from typing import Optional

import docx
import fitz  # pymupdf
from docx.opc.exceptions import PackageNotFoundError

from interview_prep.core.exceptions import ValidationError
from interview_prep.models.api import ResumeUploadResponse
from interview_prep.utils.config import get_upload_config

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf"}
DOCX_CONTENT_TYPES = {"application/vnd.openxmlformats-officedocument.wordprocessingml.document"}
TEXT_CONTENT_TYPES = {"text/plain", "text/markdown"}
TEXT_EXTENSIONS = {".txt", ".md"}
STORED_EXTENSIONS = {"pdf": ".pdf", "docx": ".docx", "text": ".txt"}


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page of a PDF."""
    text = ""
    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            text += page.get_text()
    return text


def extract_docx_text(data: bytes) -> str:
    """Paragraph text of a Word document, one paragraph per line."""
    document = docx.Document(io.BytesIO(data))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_plain_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


class ResumeService:
    """Validates, stores and extracts text from uploaded resumes."""

    def __init__(self, upload_dir: Optional[str] = None, max_bytes: Optional[int] = None,
                 public_prefix: str = "/uploads/resumes"):
        upload_config = get_upload_config()
        self.upload_dir = upload_dir or upload_config["directory"]
        self.max_bytes = max_bytes or upload_config["max_bytes"]
        self.public_prefix = public_prefix.rstrip("/")

    @staticmethod
    def _kind(filename: str, content_type: Optional[str]) -> str:
        extension = os.path.splitext(filename or "")[1].lower()
        if content_type in PDF_CONTENT_TYPES or extension == ".pdf":
            return "pdf"
        if content_type in DOCX_CONTENT_TYPES or extension == ".docx":
            return "docx"
        if content_type in TEXT_CONTENT_TYPES or extension in TEXT_EXTENSIONS:
            return "text"
        raise ValidationError(
            f"Unsupported resume type '{content_type or extension or 'unknown'}'; upload a PDF, DOCX or plain text file"
        )

    def _store(self, plan_id: str, extension: str, data: bytes) -> str:
        os.makedirs(self.upload_dir, exist_ok=True)
        name = f"{plan_id}_{uuid.uuid4().hex}{extension}"
        with open(os.path.join(self.upload_dir, name), "wb") as handle:
            handle.write(data)
        return f"{self.public_prefix}/{name}"

    async def process_upload(self, plan_id: str, filename: str, content_type: Optional[str],
                             data: bytes) -> ResumeUploadResponse:
        """
        Store an uploaded resume and extract its text.

        Raises:
            ValidationError: empty, oversized, unsupported or unreadable file
        """
        if not data:
            raise ValidationError("Uploaded resume is empty")
        if len(data) > self.max_bytes:
            raise ValidationError(f"Resume exceeds the {self.max_bytes} byte limit")

        kind = self._kind(filename, content_type)
        try:
            if kind == "pdf":
                text = await asyncio.to_thread(extract_pdf_text, data)
            elif kind == "docx":
                text = await asyncio.to_thread(extract_docx_text, data)
            else:
                text = extract_plain_text(data)
        except (RuntimeError, ValueError, PackageNotFoundError, zipfile.BadZipFile) as e:
            logger.error(f"Could not read resume '{filename}' for plan {plan_id}: {e}")
            raise ValidationError("Could not read the uploaded resume") from e

        text = text.strip()
        if not text:
            raise ValidationError("No text could be extracted from the resume")

        url = await asyncio.to_thread(self._store, plan_id, STORED_EXTENSIONS[kind], data)
        logger.info(f"Stored resume for plan {plan_id} at {url} ({len(text)} characters extracted)")
        return ResumeUploadResponse(url=url, extracted_text=text)
