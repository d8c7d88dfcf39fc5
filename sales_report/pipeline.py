"""Pipeline orchestrator for extracting and exporting sale records."""

import csv
import io
import time
from pathlib import Path

from loguru import logger

from sales_report.clients.ollama import OllamaError
from sales_report.extract import ExtractionError, extract_text
from sales_report.logging_config import DebugArtifacts
from sales_report.models import CSV_HEADERS, SaleRecord
from sales_report.parser.base import BaseParser
from sales_report.parser.text_parser import SalesTextParser

# Larger uploads are rejected before parsing
DEFAULT_MAX_BYTES = 750 * 1024


def render_csv(records: list[SaleRecord]) -> str:
    """Render records as CSV text.

    The header row is always present and left unquoted; every record field
    is double-quoted. Lines are joined with ``\\n`` without a trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=CSV_HEADERS,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    for record in records:
        writer.writerow(record.to_csv_row())

    lines = [",".join(CSV_HEADERS)]
    body = buffer.getvalue().rstrip("\n")
    if body:
        lines.append(body)
    return "\n".join(lines)


class Pipeline:
    """Orchestrates text extraction and report parsing."""

    def __init__(
        self,
        parser: BaseParser | None = None,
        debug_artifacts: DebugArtifacts | None = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        """Initialize the pipeline.

        Args:
            parser: Optional custom parser (defaults to SalesTextParser)
            debug_artifacts: Optional debug artifact manager
            max_bytes: Input files larger than this are skipped
        """
        self.debug_artifacts = debug_artifacts or DebugArtifacts()
        self.max_bytes = max_bytes
        self._parser = parser or SalesTextParser(debug_artifacts=self.debug_artifacts)

    def process_file(self, path: Path) -> list[SaleRecord]:
        """Extract and parse a single report file.

        Args:
            path: PDF or text report

        Returns:
            Sale records found in the report
        """
        size = path.stat().st_size
        if size > self.max_bytes:
            raise ExtractionError(
                f"File too large: {size} bytes (max allowed {self.max_bytes})"
            )

        text = extract_text(path)
        self.debug_artifacts.save_text(f"{path.stem}_text", text)
        logger.debug(f"Extracted {len(text)} chars from {path.name}")

        records = self._parser.parse(text)
        self.debug_artifacts.save_json(
            f"{path.stem}_records",
            [record.to_csv_row() for record in records],
        )
        return records

    def process(self, paths: list[Path]) -> list[SaleRecord]:
        """Process report files and return all sale records in input order.

        Args:
            paths: List of report file paths to process

        Returns:
            List of sale records
        """
        pipeline_start = time.perf_counter()
        logger.info(f"Processing {len(paths)} report file(s)")

        all_records: list[SaleRecord] = []
        for i, path in enumerate(paths):
            logger.info(f"[{i + 1}/{len(paths)}] {path.name}")
            try:
                records = self.process_file(path)
            except (ExtractionError, OllamaError, OSError) as e:
                logger.error(f"Failed to process {path.name}: {e}")
                continue
            all_records.extend(records)

        total_time = time.perf_counter() - pipeline_start
        logger.info(f"[TIMING] Pipeline total: {total_time:.2f}s ({len(all_records)} records)")

        return all_records

    def write_csv(self, records: list[SaleRecord], output_path: Path) -> None:
        """Write sale records to CSV.

        Args:
            records: Sale records to write
            output_path: Path for output CSV file
        """
        if not records:
            logger.warning("No sale records to write, output has header only")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_csv(records), encoding="utf-8")

        logger.info(f"Wrote {len(records)} sale records to {output_path}")

    def print_summary(self, records: list[SaleRecord]) -> None:
        """Print record counts per store."""
        if not records:
            print("No sale records processed.")
            return

        store_counts: dict[tuple[str, str], int] = {}
        for record in records:
            key = (record.store_id, record.store_name)
            store_counts[key] = store_counts.get(key, 0) + 1

        print("\n" + "=" * 50)
        print("SUMMARY")
        print("=" * 50)
        print(f"Total sale records: {len(records)}")
        print("\nBy store:")

        for (store_id, store_name), count in store_counts.items():
            label = f"{store_id} {store_name}".strip() or "(no store header)"
            print(f"  {label:40s} {count:5d}")

        print("=" * 50)

    def close(self) -> None:
        """Clean up resources."""
        self._parser.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *_) -> None:
        self.close()
