"""
Document Text Extractor

Turns an uploaded PDF into plain text with pdfplumber. The whole document
is read in one blocking call; page texts are joined with newlines.
"""

import io

import pdfplumber
import structlog

logger = structlog.get_logger(__name__)

# PDF header must appear within the first KB of the file
_PDF_MAGIC = b"%PDF"
_HEADER_WINDOW = 1024


class ExtractionError(Exception):
    """Raised when a document cannot be read as text"""


def extract_text(document: bytes) -> str:
    """
    Extract the text of every page of a PDF document.

    Args:
        document: Raw document bytes

    Returns:
        Page texts joined by newlines (pages without text contribute "")

    Raises:
        ExtractionError: If the input is empty, not a PDF, or unreadable
    """
    if not document:
        raise ExtractionError("Uploaded document is empty")
    if _PDF_MAGIC not in document[:_HEADER_WINDOW]:
        raise ExtractionError("Please upload a PDF file")

    try:
        with pdfplumber.open(io.BytesIO(document)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error("PDF extraction failed", error=str(e), size=len(document))
        raise ExtractionError(f"Could not read PDF document: {e}") from e

    logger.info("Extracted document text", pages=len(pages), characters=sum(len(p) for p in pages))
    return "\n".join(pages)
