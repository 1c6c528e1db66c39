import io

import fitz
import pytest
from docx import Document

from careertrack.services.errors import DocumentExtractionError, UnsupportedFileTypeError
from careertrack.services.text_extractor import DOCX_TYPE, extract_text


def make_pdf(text: str) -> bytes:
    document = fitz.open()
    page = document.new_page()
    page.insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


def make_docx(*paragraphs: str) -> bytes:
    document = Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_plain_text_is_decoded_as_utf8():
    assert extract_text("Café engineer".encode("utf-8"), "text/plain") == "Café engineer"


def test_plain_text_with_charset_parameter():
    assert extract_text(b"Go (Advanced)", "text/plain; charset=utf-8") == "Go (Advanced)"


@pytest.mark.parametrize("media_type", ["application/pdf", "application/octet-stream"])
def test_pdf(media_type):
    text = extract_text(make_pdf("Software Engineer at Acme"), media_type)
    assert "Software Engineer at Acme" in text


def test_docx():
    text = extract_text(make_docx("Software Engineer", "Acme, June 2023"), DOCX_TYPE)
    assert text.splitlines()[-2:] == ["Software Engineer", "Acme, June 2023"]


@pytest.mark.parametrize("media_type", ["image/png", "application/msword", "", None])
def test_unsupported_types_fail(media_type):
    with pytest.raises(UnsupportedFileTypeError):
        extract_text(b"\x89PNG\r\n", media_type)


def test_corrupt_pdf():
    with pytest.raises(DocumentExtractionError):
        extract_text(b"definitely not a pdf", "application/pdf")


def test_invalid_utf8():
    with pytest.raises(DocumentExtractionError):
        extract_text(b"\xff\xfe\xfa", "text/plain")
