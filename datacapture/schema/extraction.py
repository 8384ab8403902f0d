"""Structured extraction models shared by flows, dispatcher and exporters."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bump when the canonical extraction shape changes.
EXTRACTION_CONTRACT_VERSION = "1"

HEADING_VALUE_HEADERS = ("Heading", "Value")


def _to_camel(string: str) -> str:
  """Convert snake_case to camelCase so the API matches frontend-style payloads."""
  parts = string.split("_")
  if not parts:
    return string
  return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def _scalar_cell(value: Any) -> Any:
  # Null cells are blank; other scalars are stringified. Nested values are left for validation to reject.
  if value is None:
    return ""
  if isinstance(value, bool | int | float):
    return str(value)
  return value


class CamelModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True, extra="ignore", alias_generator=_to_camel)


class ExtractedTable(CamelModel):
  """Header/rows table. Rows are expected to match the header width."""

  headers: list[str] = Field(default_factory=list, description="Column headers, e.g. ['Order ID', 'Customer', 'Amount']. Empty when no table is found.")
  rows: list[list[str]] = Field(default_factory=list, description="Rows of cell values in header order. Empty when no table is found.")

  @field_validator("headers", mode="before")
  @classmethod
  def _coerce_headers(cls, value: Any) -> Any:
    if isinstance(value, list):
      return [_scalar_cell(item) for item in value]
    return value

  @field_validator("rows", mode="before")
  @classmethod
  def _coerce_rows(cls, value: Any) -> Any:
    if isinstance(value, list):
      return [[_scalar_cell(item) for item in row] if isinstance(row, list) else row for row in value]
    return value

  @property
  def is_empty(self) -> bool:
    return not self.headers or not self.rows


class HeadingValueRow(CamelModel):
  heading: str = Field(description="The heading of the row.")
  value: str = Field(description="The value associated with the heading.")


class TableOnly(CamelModel):
  kind: Literal["table"] = "table"
  version: str = EXTRACTION_CONTRACT_VERSION
  table: ExtractedTable = Field(default_factory=ExtractedTable)

  def as_table(self) -> ExtractedTable:
    return self.table


class TableWithText(CamelModel):
  kind: Literal["table_with_text"] = "table_with_text"
  version: str = EXTRACTION_CONTRACT_VERSION
  table: ExtractedTable = Field(default_factory=ExtractedTable)
  full_text: str = ""

  def as_table(self) -> ExtractedTable:
    return self.table


class HeadingValuePairs(CamelModel):
  kind: Literal["heading_value"] = "heading_value"
  version: str = EXTRACTION_CONTRACT_VERSION
  pairs: list[HeadingValueRow] = Field(default_factory=list)
  summary: str = ""

  def as_table(self) -> ExtractedTable:
    if not self.pairs:
      return ExtractedTable()
    return ExtractedTable(headers=list(HEADING_VALUE_HEADERS), rows=[[pair.heading, pair.value] for pair in self.pairs])


ExtractionResult = Annotated[TableOnly | TableWithText | HeadingValuePairs, Field(discriminator="kind")]


def adapt_extraction(payload: Mapping[str, Any]) -> TableOnly | TableWithText | HeadingValuePairs:
  """Map any flow output shape onto the canonical extraction contract.

  Header/rows tables arrive as `extractedTable` (or `table` in older payloads);
  heading/value rows arrive as a `table` list. Any `fullText` yields
  TableWithText, with heading/value rows folded into a two-column table.
  Heading/value rows without full text keep their pairs and optional summary.
  """
  full_text = payload.get("fullText")
  container = payload.get("extractedTable", payload.get("table"))

  if isinstance(container, Mapping):
    table = ExtractedTable.model_validate(container)
    if full_text is None:
      return TableOnly(table=table)
    return TableWithText(table=table, full_text=full_text)

  if isinstance(container, list):
    pairs = HeadingValuePairs(pairs=[HeadingValueRow.model_validate(row) for row in container], summary=payload.get("summary") or "")
    if full_text is None:
      return pairs
    return TableWithText(table=pairs.as_table(), full_text=full_text)

  if container is None and full_text is not None:
    return TableWithText(full_text=full_text)

  raise ValueError("Unrecognized extraction payload: expected 'extractedTable' or 'table'.")


class ResultType(str, Enum):
  """Tags attached to successful envelopes."""

  TEXT = "text"
  TABLE = "table"
  IMAGE_ANALYSIS = "imageAnalysis"
  DOCUMENT_ANALYSIS = "documentAnalysis"
  HANDWRITING_TRANSCRIPTION = "handwritingTranscription"


class ResultEnvelope(CamelModel):
  """Uniform success/failure wrapper returned for every capture request."""

  success: bool
  data: Any | None = None
  error: str | None = None
  type: ResultType | None = None

  @classmethod
  def ok(cls, data: Any, result_type: ResultType) -> ResultEnvelope:
    return cls(success=True, data=data, type=result_type)

  @classmethod
  def fail(cls, error: str) -> ResultEnvelope:
    return cls(success=False, error=error)

  def to_payload(self) -> dict[str, Any]:
    """Serialize for the wire, omitting fields that were never set."""
    payload = self.model_dump(mode="json", by_alias=True, exclude_none=True)
    # `data` may legitimately be an empty string or list; only drop it when absent.
    if self.success and "data" not in payload:
      payload["data"] = None
    return payload


class OutputType(str, Enum):
  """View-state kinds rendered by the capture page."""

  TEXT = "text"
  IMAGE_ANALYSIS = "imageAnalysis"
  DOCUMENT_ANALYSIS = "documentAnalysis"
  HANDWRITING_TRANSCRIPTION = "handwritingTranscription"
  IMAGE_PREVIEW = "imagePreview"
  ERROR = "error"


class OutputData(CamelModel):
  """Presentation view-state; always replaced wholesale."""

  model_config = ConfigDict(frozen=True)

  type: OutputType
  content: Any = None
  preview_url: str | None = None
  is_firebase_url: bool = False
