"""LLM prompt templates."""

from sales_report.prompts.parse import PARSE_SYSTEM, PARSE_USER

__all__ = ["PARSE_SYSTEM", "PARSE_USER"]
