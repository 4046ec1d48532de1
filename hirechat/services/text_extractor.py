"""PDF text extraction for resume ingestion."""

import io
import logging

import PyPDF2
from PyPDF2.errors import PdfReadError

from ..exceptions import ExtractionError

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


class TextExtractor:
    """Pulls raw text out of PDF byte buffers. No OCR is attempted."""

    @staticmethod
    def extract_text(file_content: bytes) -> str:
        """
        Extract text from a PDF file.

        Image-only pages yield no text; that is returned as an empty or
        short string, not as an error.

        Args:
            file_content: PDF file content as bytes

        Returns:
            Extracted text content, pages joined by newlines

        Raises:
            ExtractionError: If the payload is not a readable PDF
        """
        if not file_content or not file_content.lstrip()[:4].startswith(PDF_MAGIC):
            raise ExtractionError("The uploaded file is not a valid PDF document")

        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(file_content))
        except PdfReadError as e:
            logger.error(f"PDF could not be parsed: {e}")
            raise ExtractionError("The PDF file appears to be corrupted")
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise ExtractionError("Failed to process PDF file")

        if pdf_reader.is_encrypted:
            raise ExtractionError("Encrypted PDF files are not supported. Please upload an unprotected PDF.")

        try:
            pages = pdf_reader.pages
            if len(pages) == 0:
                raise ExtractionError("PDF file appears to be empty or corrupted")

            text_content = []
            for page in pages:
                try:
                    page_text = page.extract_text() or ""
                    if page_text.strip():
                        text_content.append(page_text)
                except Exception as e:
                    logger.warning(f"Failed to extract text from PDF page: {e}")
                    continue
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise ExtractionError("Failed to process PDF file")

        extracted_text = "\n".join(text_content).strip()
        logger.info(f"Extracted {len(extracted_text)} characters from {len(pages)} PDF page(s)")
        return extracted_text
