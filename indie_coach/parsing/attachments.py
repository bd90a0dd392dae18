"""Attachment validation for files sent with chat messages.

Checks size and type before a file is base64-encoded into a message part.
PDFs are opened with pypdf to reject corrupt uploads early.
"""

import base64
import io
import logging

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from indie_coach.models.schemas import FileData, FilePart

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PDF_MIME_TYPE = "application/pdf"

ALLOWED_MIME_TYPES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/webp",
        "image/heic",
        "image/heif",
        PDF_MIME_TYPE,
        "text/plain",
        "text/markdown",
        "text/csv",
    }
)


class AttachmentError(Exception):
    """Raised when an attachment is rejected."""

    pass


def _validate_pdf(content: bytes) -> int:
    """Check a PDF opens and has pages.

    Returns:
        Page count.

    Raises:
        AttachmentError: If the file is not a readable PDF.
    """
    if not content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise AttachmentError("Invalid PDF: file does not start with PDF header")

    try:
        reader = PdfReader(io.BytesIO(content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise AttachmentError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise AttachmentError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise AttachmentError("PDF contains no pages")
    return pages


def read_attachment(name: str | None, mime_type: str | None, content: bytes) -> FilePart:
    """Validate an uploaded file and wrap it as a message part.

    Args:
        name: Original filename.
        mime_type: MIME type reported by the browser.
        content: Raw file bytes.

    Returns:
        FilePart carrying the base64-encoded content.

    Raises:
        AttachmentError: If the file is missing a name, empty, too large,
            of an unsupported type, or a corrupt PDF.
    """
    if not name:
        raise AttachmentError("Filename is required")

    if not content:
        raise AttachmentError("Empty file provided")

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise AttachmentError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime not in ALLOWED_MIME_TYPES:
        raise AttachmentError(f"Unsupported file type: {mime or 'unknown'}")

    if mime == PDF_MIME_TYPE:
        pages = _validate_pdf(content)
        logger.info(f"Accepted PDF attachment {name} ({pages} pages)")

    return FilePart(
        file=FileData(
            name=name,
            mime_type=mime,
            data=base64.b64encode(content).decode("ascii"),
        )
    )
