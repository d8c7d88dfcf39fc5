"""Extract per-store sale records from sales report PDFs."""

__version__ = "0.1.0"
