"""Check uploaded bytes are a readable PDF before sending them to the model."""
import io
import logging
from dataclasses import dataclass
from typing import Optional

from ielts_coach.tools.errors import InvalidDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PdfInfo:
    num_pages: int


def inspect_pdf(data: bytes) -> PdfInfo:
    """
    Open the document with PyMuPDF, falling back to pdfplumber.

    Raises:
        InvalidDocument: if neither library can open it or it has no pages.
    """
    if not data:
        raise InvalidDocument("Document is empty")

    num_pages = _pages_with_pymupdf(data)
    if num_pages is None:
        num_pages = _pages_with_pdfplumber(data)
    if num_pages is None:
        raise InvalidDocument("Document is not a readable PDF")
    if num_pages == 0:
        raise InvalidDocument("PDF has no pages")

    return PdfInfo(num_pages=num_pages)


def _pages_with_pymupdf(data: bytes) -> Optional[int]:
    """Page count using PyMuPDF (fitz). Returns None on failure."""
    import fitz

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            return doc.page_count
    except Exception as e:
        logger.debug(f"PyMuPDF could not open document: {e}")
        return None


def _pages_with_pdfplumber(data: bytes) -> Optional[int]:
    """Page count using pdfplumber. Returns None on failure."""
    import pdfplumber

    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            return len(pdf.pages)
    except Exception as e:
        logger.debug(f"pdfplumber could not open document: {e}")
        return None
