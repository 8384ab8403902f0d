"""Unit tests for API exception sanitization behavior."""

from __future__ import annotations

from datacapture.core.exceptions import _sanitize_http_detail, _sanitize_validation_errors


def test_sanitize_validation_errors_removes_input_and_serializes_exception_ctx() -> None:
  """Ensure validation errors stay JSON-serializable and never echo captured media."""
  errors = [{"type": "value_error", "loc": ("body", "dataUri"), "msg": "Value error, bad payload", "input": "data:image/png;base64,AAAA", "ctx": {"error": ValueError("bad payload"), "input": "data:image/png;base64,AAAA"}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert sanitized[0]["loc"] == ["body", "dataUri"]
  assert sanitized[0]["ctx"]["error"] == "ValueError: bad payload"
  assert "input" not in sanitized[0]["ctx"]


def test_sanitize_http_detail_drops_payload_keys() -> None:
  detail = {"message": "Upload failed", "dataUri": "data:image/png;base64,AAAA", "nested": [{"content": "raw", "reason": "too large"}]}
  assert _sanitize_http_detail(detail) == {"message": "Upload failed", "nested": [{"reason": "too large"}]}
