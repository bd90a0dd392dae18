"""Unit tests for attachment validation."""

import base64
import io

import pytest
import pytest_check as check
from pypdf import PdfWriter

from indie_coach.parsing.attachments import MAX_FILE_SIZE, AttachmentError, read_attachment


@pytest.fixture
def pdf_bytes() -> bytes:
    """A valid one-page PDF built in memory."""
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestReadAttachment:
    def test_image_is_base64_encoded(self) -> None:
        content = b"\x89PNG\r\n\x1a\nimage"

        part = read_attachment("cover.png", "image/png", content)

        check.equal(part.type, "file")
        check.equal(part.file.name, "cover.png")
        check.equal(part.file.mime_type, "image/png")
        check.equal(base64.b64decode(part.file.data), content)

    def test_valid_pdf_is_accepted(self, pdf_bytes: bytes) -> None:
        part = read_attachment("contract.pdf", "application/pdf", pdf_bytes)

        assert part.file.mime_type == "application/pdf"

    def test_mime_type_parameters_are_dropped(self) -> None:
        part = read_attachment("notes.txt", "Text/Plain; charset=utf-8", b"setlist")

        assert part.file.mime_type == "text/plain"

    def test_missing_filename(self) -> None:
        with pytest.raises(AttachmentError, match="Filename is required"):
            read_attachment("", "text/plain", b"x")

    def test_empty_file(self) -> None:
        with pytest.raises(AttachmentError, match="Empty file provided"):
            read_attachment("empty.txt", "text/plain", b"")

    def test_file_too_large(self) -> None:
        with pytest.raises(AttachmentError, match="exceeds maximum allowed"):
            read_attachment("big.txt", "text/plain", b"x" * (MAX_FILE_SIZE + 1))

    def test_unsupported_type(self) -> None:
        with pytest.raises(AttachmentError, match="Unsupported file type: application/zip"):
            read_attachment("beats.zip", "application/zip", b"PK\x03\x04")

    def test_missing_type_is_unsupported(self) -> None:
        with pytest.raises(AttachmentError, match="unknown"):
            read_attachment("mystery", None, b"data")

    def test_pdf_without_header(self) -> None:
        with pytest.raises(AttachmentError, match="PDF header"):
            read_attachment("fake.pdf", "application/pdf", b"This is not a PDF")

    def test_truncated_pdf(self) -> None:
        with pytest.raises(AttachmentError):
            read_attachment("broken.pdf", "application/pdf", b"%PDF-1.4\n%%garbage")
