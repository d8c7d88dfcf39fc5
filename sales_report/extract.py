"""Report text extraction from PDF and plain-text files."""

from pathlib import Path

import pdfplumber
from loguru import logger


class ExtractionError(Exception):
    """Report file could not be turned into text."""

    pass


def extract_pdf_text(pdf_path: Path) -> str:
    """Extract the text of every page, merged with newlines.

    Args:
        pdf_path: Path to the PDF report

    Returns:
        Text of all pages in page order
    """
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    try:
        with pdfplumber.open(pdf_path) as pdf:
            logger.info(f"PDF has {len(pdf.pages)} page(s)")
            pages_text = [page.extract_text() or "" for page in pdf.pages]
    except FileNotFoundError:
        raise
    except Exception as e:
        logger.error(f"Failed to read PDF {pdf_path.name}: {e}")
        raise ExtractionError(f"PDF extraction failed: {e}") from e

    return "\n".join(pages_text)


def extract_text(path: Path) -> str:
    """Return report text for a .pdf or .txt file."""
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return extract_pdf_text(path)
    if suffix == ".txt":
        if not path.exists():
            raise FileNotFoundError(f"Text file not found: {path}")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.error(f"Text file {path.name} is not UTF-8: {e}")
            raise ExtractionError(f"Text file is not valid UTF-8: {e}") from e
    raise ExtractionError(f"Unsupported report file type: {path.suffix or path.name}")
