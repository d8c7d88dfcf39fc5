"""Report text parsing modules."""

from sales_report.parser.base import BaseParser
from sales_report.parser.ollama import OllamaParser
from sales_report.parser.text_parser import (
    InvalidInput,
    SalesTextParser,
    decompose_amount,
    normalize_lines,
    parse_sales_text,
)

__all__ = [
    "BaseParser",
    "InvalidInput",
    "OllamaParser",
    "SalesTextParser",
    "decompose_amount",
    "normalize_lines",
    "parse_sales_text",
]
