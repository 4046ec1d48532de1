"""Input validation for resume uploads."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import FileTooLargeError, UnsupportedFileTypeError, ValidationError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


def validate_resume_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    max_size_mb: int,
    allowed_types: Iterable[str] = ("pdf",),
) -> None:
    """
    Check a resume upload before it reaches the ingestion pipeline.

    Args:
        filename: Client-supplied file name
        content_type: Declared MIME type
        size: Payload size in bytes
        max_size_mb: Size ceiling in megabytes
        allowed_types: Accepted file extensions without the dot

    Raises:
        ValidationError: If no file was provided
        UnsupportedFileTypeError: If the extension or MIME type is not PDF
        FileTooLargeError: If the payload exceeds the size ceiling
    """
    if not filename or size == 0:
        raise ValidationError("No file provided")

    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in {t.lower() for t in allowed_types}:
        logger.info(f"Rejected upload {filename!r}: unsupported extension")
        raise UnsupportedFileTypeError()

    if content_type and content_type.split(";")[0].strip().lower() not in PDF_CONTENT_TYPES:
        logger.info(f"Rejected upload {filename!r}: content type {content_type}")
        raise UnsupportedFileTypeError()

    max_bytes = max_size_mb * 1024 * 1024
    if size > max_bytes:
        raise FileTooLargeError(f"File size exceeds the maximum of {max_size_mb}MB")
