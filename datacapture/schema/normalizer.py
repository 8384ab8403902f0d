"""Defaulting helpers for structured model output."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

# Declared output field -> empty default. Copied on use.
FIELD_DEFAULTS: dict[str, Any] = {
  "extractedTable": {"headers": [], "rows": []},
  "table": [],
  "fullText": "",
  "summary": "",
  "transcribedText": "",
  "response": "",
}


def _cell(value: Any) -> str:
  if value is None:
    return ""
  return value if isinstance(value, str) else str(value)


def normalize_table(value: Any) -> dict[str, Any]:
  """Return `{headers, rows}` with both keys present and every cell a string."""
  if not isinstance(value, Mapping):
    return {"headers": [], "rows": []}
  normalized = {key: copy.deepcopy(item) for key, item in value.items() if key not in {"headers", "rows"}}
  headers = value.get("headers")
  rows = value.get("rows")
  normalized["headers"] = [_cell(header) for header in headers] if isinstance(headers, list) else []
  normalized["rows"] = [[_cell(cell) for cell in row] if isinstance(row, list) else [_cell(row)] for row in rows] if isinstance(rows, list) else []
  return normalized


def normalize_heading_value_rows(value: Any) -> list[dict[str, Any]]:
  """Return heading/value rows with both keys present as strings."""
  if not isinstance(value, list):
    return []
  normalized: list[dict[str, Any]] = []
  for row in value:
    if not isinstance(row, Mapping):
      continue
    item = copy.deepcopy(dict(row))
    item["heading"] = _cell(row.get("heading"))
    item["value"] = _cell(row.get("value"))
    normalized.append(item)
  return normalized


def normalize_inference_result(payload: Any, fields: Iterable[str], *, optional: Iterable[str] = ()) -> dict[str, Any]:
  """Fill every declared output field with its empty default.

  `fields` lists the keys the flow's output schema declares. Keys listed in
  `optional` are normalized when present but not added when absent. The input
  is never mutated and the function is idempotent.
  """
  source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
  normalized = copy.deepcopy(dict(source))
  optional_fields = set(optional)

  for field in fields:
    if field not in FIELD_DEFAULTS:
      raise KeyError(f"No default declared for output field '{field}'.")
    present = source.get(field) is not None
    if not present and field in optional_fields:
      normalized.pop(field, None)
      continue
    if field == "extractedTable":
      normalized[field] = normalize_table(source.get(field))
    elif field == "table":
      normalized[field] = _normalize_table_field(source.get(field))
    else:
      normalized[field] = _cell(source.get(field))

  return normalized


def _normalize_table_field(value: Any) -> Any:
  # `table` is heading/value rows in image flows and a header/rows table in older payloads.
  if isinstance(value, Mapping):
    return normalize_table(value)
  return normalize_heading_value_rows(value)
