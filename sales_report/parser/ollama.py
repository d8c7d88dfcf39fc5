"""Ollama-based report parser.

Alternative to the line scanner for reports whose layout drifts. Output is
not deterministic, so nothing here feeds back into SalesTextParser; both
only share the SaleRecord contract.
"""

import re
from decimal import Decimal, InvalidOperation

from loguru import logger
from pydantic import ValidationError

from sales_report.clients.ollama import OllamaClient, OllamaError
from sales_report.logging_config import DebugArtifacts
from sales_report.models import ExtractedSale, SaleExtractionResponse, SaleRecord
from sales_report.parser.base import BaseParser
from sales_report.parser.text_parser import InvalidInput, SalesTextParser
from sales_report.prompts.parse import PARSE_SYSTEM, PARSE_USER

MAX_PROMPT_WORDS = 6000

EAN_RE = re.compile(r"^\d{13}$")
CENT = Decimal("0.01")


def trim_to_max_words(text: str, max_words: int) -> str:
    """Keep at most max_words whitespace-separated words, one line per input line."""
    kept: list[str] = []
    remaining = max_words
    for line in text.split("\n"):
        words = line.split()
        if remaining <= 0:
            break
        kept.append(" ".join(words[:remaining]))
        remaining -= len(words)
    return "\n".join(kept)


class OllamaParser(BaseParser):
    """Report parser that asks a local LLM for structured sale lines."""

    def __init__(
        self,
        ollama_client: OllamaClient | None = None,
        debug_artifacts: DebugArtifacts | None = None,
        model: str = "mistral",
        host: str = "localhost",
        port: int = 11434,
        max_prompt_words: int = MAX_PROMPT_WORDS,
    ):
        """Initialize the Ollama parser.

        Args:
            ollama_client: Optional pre-configured Ollama client
            debug_artifacts: Optional debug artifact manager
            model: Ollama model to use for parsing
            host: Ollama server host
            port: Ollama server port
            max_prompt_words: Report text beyond this many words is cut off
        """
        super().__init__(debug_artifacts)
        self._ollama = ollama_client
        self._owns_client = ollama_client is None
        self.model = model
        self.host = host
        self.port = port
        self.max_prompt_words = max_prompt_words
        self._line_filter = SalesTextParser()

    def _ensure_client(self) -> OllamaClient:
        """Get or create the Ollama client."""
        if self._ollama is None:
            self._ollama = OllamaClient(
                host=self.host,
                port=self.port,
                model=self.model,
                timeout=600.0,
            )
        return self._ollama

    def prepare_text(self, text: str) -> str:
        """Reduce report text to the lines the model needs."""
        relevant = "\n".join(self._line_filter.relevant_lines(text))
        return trim_to_max_words(relevant, self.max_prompt_words)

    def parse(self, text: str) -> list[SaleRecord]:
        """Extract sale records from report text.

        Args:
            text: Full extracted text of the report

        Returns:
            List of extracted sale records

        Raises:
            InvalidInput: If text is not a string
            OllamaError: If the model cannot be reached or replies garbage
        """
        if not isinstance(text, str):
            raise InvalidInput(
                f"Report text must be a string, got {type(text).__name__}"
            )

        prepared = self.prepare_text(text)
        if not prepared:
            logger.warning("No report lines found, skipping LLM call")
            return []

        self.debug_artifacts.save_text("llm_prompt_text", prepared)
        client = self._ensure_client()
        if not client.check_connection():
            logger.error("Cannot connect to Ollama. Is it running?")
            raise OllamaError("Ollama connection failed")

        try:
            prompt = f"{PARSE_USER}\n\nReport text:\n{prepared}"
            extraction = client.generate_structured(
                prompt=prompt,
                response_model=SaleExtractionResponse,
                system=PARSE_SYSTEM,
                temperature=0.0,
            )
            self.debug_artifacts.save_json("llm_response", extraction.model_dump())
        except OllamaError as e:
            logger.error(f"Failed to parse with LLM: {e}")
            raise

        records: list[SaleRecord] = []
        for sale in extraction.sales:
            record = self._to_record(sale)
            if record is not None:
                records.append(record)

        dropped = len(extraction.sales) - len(records)
        if dropped:
            logger.warning(f"Dropped {dropped} LLM sale line(s) that failed validation")
        logger.info(f"LLM extracted {len(records)} sale records")
        return records

    def _to_record(self, sale: ExtractedSale) -> SaleRecord | None:
        """Convert one LLM sale line into a SaleRecord."""
        ean = sale.ean.strip()
        if not EAN_RE.match(ean):
            logger.warning(f"Invalid EAN from LLM: {sale.ean!r}")
            return None

        try:
            amount = Decimal(sale.amount.strip().replace(",", "."))
            # "-0" is signed but not negative
            if not amount.is_finite() or amount.is_signed():
                logger.warning(f"Rejected amount: {sale.amount!r} for EAN {ean}")
                return None
            amount = amount.quantize(CENT)
        except InvalidOperation:
            logger.warning(f"Could not parse amount: {sale.amount!r} for EAN {ean}")
            return None

        try:
            return SaleRecord(
                store_id=sale.store_id.strip(),
                store_name=sale.store_name.strip(),
                ean=ean,
                quantity=str(max(sale.quantity, 1)),
                amount=str(amount),
                persona=sale.persona.strip(),
            )
        except ValidationError as e:
            logger.warning(f"Failed to build sale record: {sale}, error: {e}")
            return None

    def close(self) -> None:
        """Clean up resources."""
        if self._owns_client and self._ollama is not None:
            self._ollama.close()
            self._ollama = None
