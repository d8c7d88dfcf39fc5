"""Pydantic data models for sale records and parse results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

CSV_HEADERS = [
    "SucursalID",
    "SucursalName",
    "EAN",
    "CantidadVendida",
    "Importe",
    "NumPersonaVtas",
]


class SaleRecord(BaseModel):
    """One sold item line, tagged with the store it was reported under."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    store_id: str = Field(default="", alias="SucursalID")
    store_name: str = Field(default="", alias="SucursalName")
    ean: str = Field(alias="EAN", pattern=r"^\d{13}$")
    quantity: str = Field(default="1", alias="CantidadVendida")
    amount: str = Field(alias="Importe", description="Unit price, 2 fraction digits")
    persona: str = Field(default="", alias="NumPersonaVtas")

    def to_csv_row(self) -> dict[str, str]:
        """Convert to CSV row dict keyed by report column names."""
        return self.model_dump(by_alias=True)


class StoreContext(BaseModel):
    """Store header currently in effect during a parse pass."""

    id: str = ""
    name: str = ""


class AnomalyKind(str, Enum):
    MALFORMED_HEADER = "malformed_header"
    MALFORMED_AMOUNT = "malformed_amount"


class ParseAnomaly(BaseModel):
    """Non-fatal problem found while scanning a report."""

    kind: AnomalyKind
    line_number: int = Field(description="1-based index into the normalized lines")
    line: str


class ParseResult(BaseModel):
    """Records extracted from one report plus the anomalies seen on the way."""

    records: list[SaleRecord] = Field(default_factory=list)
    anomalies: list[ParseAnomaly] = Field(default_factory=list)


class ParserOptions(BaseModel):
    """Construction-time options for the line scanner."""

    store_keyword: str = Field(default="Sucursal", min_length=1)
    persona_label: str = Field(default="Num. Persona Vtas:", min_length=1)
    drop_malformed_amounts: bool = Field(
        default=False,
        description="Skip item lines whose amount token cannot be decomposed",
    )


# LLM Response Schemas for structured output


class ExtractedSale(BaseModel):
    """Single sale line extracted by LLM from report text."""

    store_id: str = Field(default="", description="13-digit store id from the 'Sucursal' header")
    store_name: str = Field(default="", description="Store name inside the header parentheses")
    ean: str = Field(description="13-digit EAN barcode of the item")
    quantity: int = Field(default=1, description="Units sold")
    amount: str = Field(description="Unit price with a dot as decimal separator")
    persona: str = Field(default="", description="Value after 'Num. Persona Vtas:', empty if absent")


class SaleExtractionResponse(BaseModel):
    """LLM response containing extracted sale lines."""

    sales: list[ExtractedSale] = Field(
        description="List of all sale lines found in the report, in document order"
    )
