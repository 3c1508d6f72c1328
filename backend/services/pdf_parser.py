import io
import logging

import pdfplumber

logger = logging.getLogger(__name__)


class ParseFailure(Exception):
    """The bytes are not a readable PDF document."""


def extract_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF file, pages separated by a blank line."""
    try:
        with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.warning("PDF parsing error: %s", e)
        raise ParseFailure("Failed to parse PDF") from e
    return "\n\n".join(pages).strip()
