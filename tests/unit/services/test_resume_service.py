"""
Unit tests for ResumeService.
"""
import io
import os

import docx
import fitz
import pytest

from interview_prep.core.exceptions import ValidationError
from interview_prep.services.resume_service import ResumeService

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def service(tmp_path):
    return ResumeService(upload_dir=str(tmp_path), max_bytes=1024 * 1024)


def pdf_bytes(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def docx_bytes(*paragraphs: str) -> bytes:
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestResumeUpload:
    @pytest.mark.asyncio
    async def test_plain_text(self, service, tmp_path):
        result = await service.process_upload("plan-1", "cv.txt", "text/plain", b"Jane Doe\nPython, Go")

        assert result.extracted_text == "Jane Doe\nPython, Go"
        assert result.url.startswith("/uploads/resumes/plan-1_")
        assert os.listdir(tmp_path) == [result.url.rsplit("/", 1)[1]]

    @pytest.mark.asyncio
    async def test_pdf(self, service):
        result = await service.process_upload("plan-1", "cv.pdf", "application/pdf", pdf_bytes("Jane Doe Kubernetes"))

        assert "Kubernetes" in result.extracted_text
        assert result.url.endswith(".pdf")

    @pytest.mark.asyncio
    async def test_docx(self, service):
        data = docx_bytes("Jane Doe", "Led the Kafka migration")
        result = await service.process_upload("plan-1", "cv.docx", DOCX_TYPE, data)

        assert result.extracted_text == "Jane Doe\nLed the Kafka migration"
        assert result.url.endswith(".docx")

    @pytest.mark.asyncio
    async def test_docx_detected_by_extension(self, service):
        result = await service.process_upload("plan-1", "cv.docx", "application/octet-stream", docx_bytes("Go, Rust"))

        assert result.extracted_text == "Go, Rust"

    @pytest.mark.asyncio
    async def test_corrupt_docx(self, service, tmp_path):
        with pytest.raises(ValidationError):
            await service.process_upload("plan-1", "cv.docx", DOCX_TYPE, b"not a zip archive")

        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_empty_file(self, service):
        with pytest.raises(ValidationError):
            await service.process_upload("plan-1", "cv.txt", "text/plain", b"")

    @pytest.mark.asyncio
    async def test_too_large(self, tmp_path):
        service = ResumeService(upload_dir=str(tmp_path), max_bytes=10)

        with pytest.raises(ValidationError):
            await service.process_upload("plan-1", "cv.txt", "text/plain", b"x" * 11)

    @pytest.mark.asyncio
    async def test_unsupported_type(self, service, tmp_path):
        with pytest.raises(ValidationError):
            await service.process_upload("plan-1", "cv.png", "image/png", b"\x89PNG")

        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_whitespace_only(self, service):
        with pytest.raises(ValidationError):
            await service.process_upload("plan-1", "cv.txt", "text/plain", b"   \n ")
