"""Data URI helpers for captured media payloads."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

DATA_URI_PREFIX = "data:"
IMAGE_DATA_URI_PREFIX = "data:image"
_DEFAULT_MIME_TYPE = "text/plain"


class InvalidDataUriError(ValueError):
  """Raised when a payload is not a decodable data URI."""


@dataclass(frozen=True)
class DataUri:
  """Decoded data URI: MIME type plus raw bytes."""

  mime_type: str
  data: bytes

  @property
  def size(self) -> int:
    return len(self.data)


def parse_data_uri(value: str) -> DataUri:
  """Decode `data:<mime>[;base64],<payload>` into bytes."""
  if not isinstance(value, str) or not value.startswith(DATA_URI_PREFIX):
    raise InvalidDataUriError("Payload is not a data URI.")

  header, sep, payload = value[len(DATA_URI_PREFIX) :].partition(",")
  if not sep:
    raise InvalidDataUriError("Data URI is missing the ',' separator.")

  params = [part.strip() for part in header.split(";")]
  is_base64 = params[-1].lower() == "base64"
  if is_base64:
    params = params[:-1]
  mime_type = params[0].lower() if params and params[0] else _DEFAULT_MIME_TYPE

  if not is_base64:
    return DataUri(mime_type=mime_type, data=unquote_to_bytes(payload))

  try:
    data = base64.b64decode(payload, validate=True)
  except (binascii.Error, ValueError) as exc:
    raise InvalidDataUriError(f"Data URI payload is not valid base64: {exc}") from exc
  return DataUri(mime_type=mime_type, data=data)


def build_data_uri(data: bytes, mime_type: str) -> str:
  """Encode bytes as a base64 data URI."""
  return f"{DATA_URI_PREFIX}{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
