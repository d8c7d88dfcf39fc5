"""Abstract base class for sales report parsers."""

from abc import ABC, abstractmethod

from sales_report.logging_config import DebugArtifacts
from sales_report.models import SaleRecord


class BaseParser(ABC):
    """Abstract base class for report text parsers.

    Subclasses turn the text extracted from one sales report into
    sale records, in the order they appear in the report.
    """

    def __init__(self, debug_artifacts: DebugArtifacts | None = None):
        self.debug_artifacts = debug_artifacts or DebugArtifacts()

    @abstractmethod
    def parse(self, text: str) -> list[SaleRecord]:
        """Extract sale records from report text.

        Args:
            text: Full extracted text of the report, pages already merged

        Returns:
            List of extracted sale records
        """
        pass

    def close(self) -> None:
        """Release any resources held by the parser."""
        return None

    def __enter__(self) -> "BaseParser":
        return self

    def __exit__(self, *_) -> None:
        self.close()
