"""Tests for report text extraction with a faked pdfplumber document."""

import pdfplumber
import pytest

from sales_report.extract import ExtractionError, extract_pdf_text, extract_text


class FakePage:
    def __init__(self, text):
        self._text = text

    def extract_text(self):
        return self._text


class FakePdf:
    def __init__(self, *texts):
        self.pages = [FakePage(text) for text in texts]

    def __enter__(self):
        return self

    def __exit__(self, *_):
        return None


@pytest.fixture
def pdf_path(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


class TestExtractPdfText:
    """Page merging and error wrapping"""

    def test_pages_merged_with_newlines(self, pdf_path, monkeypatch):
        fake = FakePdf(
            "Sucursal 8422416200034 ( ECI GOYA 0003 )\n8437021807011 119,763",
            None,
            "Num. Persona Vtas: 0051258002",
        )
        opened = []

        def fake_open(path):
            opened.append(path)
            return fake

        monkeypatch.setattr(pdfplumber, "open", fake_open)

        text = extract_pdf_text(pdf_path)

        assert opened == [pdf_path]
        assert text == (
            "Sucursal 8422416200034 ( ECI GOYA 0003 )\n"
            "8437021807011 119,763\n"
            "\n"
            "Num. Persona Vtas: 0051258002"
        )

    def test_unreadable_pdf_raises_extraction_error(self, pdf_path, monkeypatch):
        def broken_open(path):
            raise ValueError("No /Root object! - Is this really a PDF?")

        monkeypatch.setattr(pdfplumber, "open", broken_open)

        with pytest.raises(ExtractionError, match="PDF extraction failed"):
            extract_pdf_text(pdf_path)

    def test_missing_pdf(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            extract_pdf_text(tmp_path / "missing.pdf")


class TestExtractText:
    """Dispatch on file type"""

    def test_pdf_suffix_uses_pdfplumber(self, pdf_path, monkeypatch):
        monkeypatch.setattr(pdfplumber, "open", lambda path: FakePdf("page one", "page two"))

        assert extract_text(pdf_path) == "page one\npage two"

    def test_text_file_read_as_utf8(self, tmp_path):
        path = tmp_path / "report.TXT"
        path.write_text("Sucursal 8422416200034 (CAÑADA)\n", encoding="utf-8")

        assert extract_text(path) == "Sucursal 8422416200034 (CAÑADA)\n"

    def test_invalid_utf8_raises_extraction_error(self, tmp_path):
        path = tmp_path / "report.txt"
        path.write_bytes(b"\xff\xfe\x00")

        with pytest.raises(ExtractionError, match="not valid UTF-8"):
            extract_text(path)

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "report.docx"
        path.write_text("x", encoding="utf-8")

        with pytest.raises(ExtractionError, match="Unsupported"):
            extract_text(path)
