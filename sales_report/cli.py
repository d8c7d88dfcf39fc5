"""CLI entry point for the sales report extractor."""

import argparse
import sys
from pathlib import Path

from loguru import logger

from sales_report.logging_config import DebugArtifacts, configure_logging
from sales_report.models import ParserOptions
from sales_report.parser.base import BaseParser
from sales_report.parser.ollama import OllamaParser
from sales_report.parser.text_parser import SalesTextParser
from sales_report.pipeline import DEFAULT_MAX_BYTES, Pipeline

SUPPORTED_SUFFIXES = {".pdf", ".txt"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sales-report",
        description="Extract per-store sale records from sales report PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process",
        help="Extract sale records from report PDFs or text dumps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s report.pdf -o sales.csv
  %(prog)s reports/*.pdf -o all_sales.csv
  %(prog)s report.txt --strict-amounts -o sales.csv
  %(prog)s report.pdf --strategy ollama --ollama-model llama3
        """,
    )
    process_parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="PDF or .txt report file(s) to process",
    )
    process_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("output.csv"),
        help="Output CSV file path (default: output.csv)",
    )
    process_parser.add_argument(
        "--strategy",
        choices=["regex", "ollama"],
        default="regex",
        help="Extraction strategy (default: regex)",
    )
    process_parser.add_argument(
        "--strict-amounts",
        action="store_true",
        help="Skip item lines whose price/quantity token is malformed",
    )
    process_parser.add_argument(
        "--max-bytes",
        type=int,
        default=DEFAULT_MAX_BYTES,
        help=f"Skip input files larger than this (default: {DEFAULT_MAX_BYTES})",
    )
    process_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    process_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output and save artifacts",
    )
    process_parser.add_argument(
        "--ollama-model",
        default="mistral",
        help="Ollama model for the ollama strategy (default: mistral)",
    )
    process_parser.add_argument(
        "--ollama-host",
        default="localhost:11434",
        help="Ollama server address (default: localhost:11434)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    return args


def build_parser(args: argparse.Namespace, debug_artifacts: DebugArtifacts | None) -> BaseParser:
    """Create the parser selected on the command line."""
    if args.strategy == "ollama":
        ollama_parts = args.ollama_host.split(":")
        ollama_host = ollama_parts[0]
        ollama_port = int(ollama_parts[1]) if len(ollama_parts) > 1 else 11434
        return OllamaParser(
            debug_artifacts=debug_artifacts,
            model=args.ollama_model,
            host=ollama_host,
            port=ollama_port,
        )

    options = ParserOptions(drop_malformed_amounts=args.strict_amounts)
    return SalesTextParser(options=options, debug_artifacts=debug_artifacts)


def run_process(args: argparse.Namespace) -> int:
    """Run the process command to extract sale records."""
    report_paths: list[Path] = []
    for input_path in args.inputs:
        if not input_path.exists():
            logger.error(f"File not found: {input_path}")
            return 1
        if input_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            logger.warning(f"Skipping unsupported file: {input_path}")
            continue
        report_paths.append(input_path)

    if not report_paths:
        logger.error("No valid report files provided")
        return 1

    debug_artifacts = None
    if args.debug:
        debug_dir = args.output.parent / "debug"
        debug_artifacts = DebugArtifacts(debug_dir)

    try:
        with Pipeline(
            parser=build_parser(args, debug_artifacts),
            debug_artifacts=debug_artifacts,
            max_bytes=args.max_bytes,
        ) as pipeline:
            records = pipeline.process(report_paths)

            if not records:
                print("No sale records found.")
                return 1

            pipeline.write_csv(records, args.output)

            if args.verbose or args.debug:
                pipeline.print_summary(records)

            print(f"\nOutput written to: {args.output}")

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Pipeline failed: {e}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)

    if args.command == "process":
        return run_process(args)

    logger.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
