"""
Plain-text extraction for uploaded resumes (PDF, DOCX, TXT).
"""
import io
import logging

import fitz  # PyMuPDF
from docx import Document

from .errors import UnsupportedFileTypeError, DocumentExtractionError

logger = logging.getLogger(__name__)

PDF_TYPES = {"application/pdf", "application/octet-stream"}
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_TYPE = "text/plain"


def pdf_to_text(pdf_bytes: bytes) -> str:
    """Extract text from every page of a PDF using PyMuPDF."""
    pages = []
    pdf_document = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        for page in pdf_document:
            pages.append(page.get_text())
    finally:
        pdf_document.close()
    return "\n".join(pages)


def docx_to_text(docx_bytes: bytes) -> str:
    document = Document(io.BytesIO(docx_bytes))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def extract_text(content: bytes, media_type: str) -> str:
    """
    Convert an uploaded document into plain text, dispatching on its declared media type.

    Args:
        content: Raw file bytes
        media_type: Content type declared by the client (parameters such as
            "; charset=utf-8" are ignored)

    Returns:
        Extracted text

    Raises:
        UnsupportedFileTypeError: media type is not PDF, DOCX or plain text
        DocumentExtractionError: the file could not be decoded
    """
    base_type = (media_type or "").split(";")[0].strip().lower()

    if base_type in PDF_TYPES:
        decoder = pdf_to_text
    elif base_type == DOCX_TYPE:
        decoder = docx_to_text
    elif base_type == TEXT_TYPE:
        decoder = lambda data: data.decode("utf-8")  # noqa: E731
    else:
        raise UnsupportedFileTypeError(media_type)

    try:
        return decoder(content)
    except Exception as e:
        logger.error(f"Failed to extract text from {base_type} upload: {e}")
        raise DocumentExtractionError(f"Could not read {base_type} file: {e}") from e
