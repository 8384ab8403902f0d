"""Unit tests for lenient JSON parsing of model output."""

from __future__ import annotations

import json

import pytest

from datacapture.ai.json_parser import extract_json_block, parse_json_with_fallback, strip_json_fences


def test_strip_json_fences() -> None:
  assert strip_json_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
  assert strip_json_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_recovers_json_embedded_in_prose() -> None:
  raw = 'Here is the table you asked for: {"extractedTable": {"headers": ["A"], "rows": [["}"]]}} Hope it helps!'
  assert parse_json_with_fallback(raw) == {"extractedTable": {"headers": ["A"], "rows": [["}"]]}}


def test_parse_removes_trailing_commas() -> None:
  assert parse_json_with_fallback('{"table": [{"heading": "A", "value": "1"},],}') == {"table": [{"heading": "A", "value": "1"}]}


def test_parse_raises_when_nothing_parses() -> None:
  with pytest.raises(json.JSONDecodeError):
    parse_json_with_fallback("no json")


def test_extract_json_block_honors_escaped_quotes() -> None:
  assert extract_json_block('x {"a": "quote \\" and }"} y') == '{"a": "quote \\" and }"}'
  assert extract_json_block('{"unterminated": 1') is None
