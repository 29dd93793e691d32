"""
PDF text extraction for uploaded syllabi.
"""

import io
import logging

from PyPDF2 import PdfReader
from PyPDF2.errors import PyPdfError

logger = logging.getLogger(__name__)


class PDFTextExtractionError(Exception):
    """The upload could not be read, or holds no extractable text."""


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Return the text of every page, joined by newlines.

    Raises PDFTextExtractionError for unreadable files and for PDFs whose
    pages yield no text (typically scanned, image-only documents).
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, OSError) as e:
        raise PDFTextExtractionError(f"The file could not be read as a PDF ({e})") from e

    text = "\n".join(pages)
    if not text.strip():
        raise PDFTextExtractionError(
            "No text content found in PDF. The file might be image-based or corrupted."
        )

    logger.info(f"Extracted {len(text)} characters from {len(pages)} PDF page(s)")
    return text
