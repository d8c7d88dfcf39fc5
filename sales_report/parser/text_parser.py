"""Deterministic line scanner for per-store sales reports.

Reports list store header blocks followed by item lines:

    Sucursal 8422416200034 ( ECI GOYA 0003 )
    8437021807011 119,763
    Num. Persona Vtas: 0051258002

Each item line carries the EAN and one numeric token that glues the unit
price (always two fraction digits) and the quantity sold together.
"""

import re

from loguru import logger

from sales_report.logging_config import DebugArtifacts
from sales_report.models import (
    AnomalyKind,
    ParseAnomaly,
    ParseResult,
    ParserOptions,
    SaleRecord,
    StoreContext,
)
from sales_report.parser.base import BaseParser

DEFAULT_QUANTITY = "1"
CENTS_DIGITS = 2

ITEM_PATTERN = re.compile(r"^(\d{13})\s+([\d.,]*,[\d.,]*)(?=\s|$)")


class InvalidInput(TypeError):
    """Report text is missing or not a string."""

    pass


def normalize_lines(text: str) -> list[str]:
    """Split text into trimmed lines, dropping the empty ones.

    Handles both ``\\n`` and ``\\r\\n`` line endings.
    """
    stripped = (line.strip() for line in text.split("\n"))
    return [line for line in stripped if line]


def decompose_amount(token: str) -> tuple[str, str] | None:
    """Split a combined price/quantity token into (amount, quantity).

    The report renders the unit price with two decimals and appends the
    quantity digits right after the cents, e.g. ``119,763`` is 119.76 x 3.
    Dots are thousands separators.

    Args:
        token: Numeric token from an item line

    Returns:
        Tuple of (amount with dot decimal, quantity digits), or None when the
        token has no usable ``integer,fraction`` structure
    """
    parts = token.replace(".", "").split(",")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None

    integer_part, fraction_part = parts
    if len(fraction_part) > CENTS_DIGITS:
        cents = fraction_part[:CENTS_DIGITS]
        # Literal digits, leading zeros preserved
        quantity = fraction_part[CENTS_DIGITS:]
    else:
        # ",5" means fifty cents
        cents = fraction_part.ljust(CENTS_DIGITS, "0")
        quantity = DEFAULT_QUANTITY

    return f"{integer_part}.{cents}", quantity


class SalesTextParser(BaseParser):
    """Single forward pass over report lines with a one-line lookahead."""

    def __init__(
        self,
        options: ParserOptions | None = None,
        debug_artifacts: DebugArtifacts | None = None,
    ):
        super().__init__(debug_artifacts)
        self.options = options or ParserOptions()
        self._keyword = self.options.store_keyword.casefold()
        self._header_re = re.compile(
            rf"^{re.escape(self.options.store_keyword)}\s+(\d{{13}})\s*\((.*?)\)",
            re.IGNORECASE,
        )

    def _match_header(self, line: str) -> StoreContext | None:
        match = self._header_re.match(line)
        if not match:
            return None
        return StoreContext(id=match.group(1), name=match.group(2).strip())

    def _is_header_like(self, line: str) -> bool:
        return line.casefold().startswith(self._keyword)

    def _match_persona(self, line: str) -> str | None:
        label = self.options.persona_label
        if not line.startswith(label):
            return None
        return line[len(label):].strip()

    def scan(self, text: str) -> ParseResult:
        """Scan report text into sale records and anomalies.

        Args:
            text: Full report text

        Returns:
            ParseResult with records in encounter order

        Raises:
            InvalidInput: If text is not a string
        """
        if not isinstance(text, str):
            raise InvalidInput(
                f"Report text must be a string, got {type(text).__name__}"
            )

        lines = normalize_lines(text)
        context = StoreContext()
        result = ParseResult()
        logger.debug(f"Scanning {len(lines)} non-empty lines")

        index = 0
        while index < len(lines):
            line = lines[index]
            line_number = index + 1
            index += 1

            header = self._match_header(line)
            if header is not None:
                context = header
                logger.debug(f"Line {line_number}: store {context.id} ({context.name})")
                continue

            if self._is_header_like(line):
                logger.warning(f"Line {line_number}: malformed store header kept previous store: {line!r}")
                result.anomalies.append(
                    ParseAnomaly(kind=AnomalyKind.MALFORMED_HEADER, line_number=line_number, line=line)
                )
                continue

            item = ITEM_PATTERN.match(line)
            if item is None:
                continue

            ean, token = item.groups()
            decomposed = decompose_amount(token)
            if decomposed is None:
                logger.warning(f"Line {line_number}: malformed amount {token!r} for EAN {ean}")
                result.anomalies.append(
                    ParseAnomaly(kind=AnomalyKind.MALFORMED_AMOUNT, line_number=line_number, line=line)
                )
                amount, quantity = token, DEFAULT_QUANTITY
            else:
                amount, quantity = decomposed

            persona = ""
            if index < len(lines):
                found = self._match_persona(lines[index])
                if found is not None:
                    persona = found
                    index += 1

            if decomposed is None and self.options.drop_malformed_amounts:
                continue

            result.records.append(
                SaleRecord(
                    store_id=context.id,
                    store_name=context.name,
                    ean=ean,
                    quantity=quantity,
                    amount=amount,
                    persona=persona,
                )
            )

        logger.info(
            f"Extracted {len(result.records)} sale records "
            f"({len(result.anomalies)} anomalies)"
        )
        return result

    def relevant_lines(self, text: str) -> list[str]:
        """Return only the header, item and persona lines of the text."""
        return [
            line
            for line in normalize_lines(text)
            if self._is_header_like(line)
            or ITEM_PATTERN.match(line)
            or self._match_persona(line) is not None
        ]

    def parse(self, text: str) -> list[SaleRecord]:
        """Extract sale records from report text."""
        result = self.scan(text)
        if result.anomalies:
            self.debug_artifacts.save_json(
                "parse_anomalies",
                [anomaly.model_dump(mode="json") for anomaly in result.anomalies],
            )
        return result.records


def parse_sales_text(text: str, options: ParserOptions | None = None) -> list[SaleRecord]:
    """Parse report text with a fresh scanner.

    Args:
        text: Full report text
        options: Optional scanner options

    Returns:
        Sale records in encounter order
    """
    return SalesTextParser(options=options).parse(text)
