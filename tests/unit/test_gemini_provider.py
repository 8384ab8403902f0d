from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from datacapture.ai.providers.base import InferenceError, MediaPart
from datacapture.ai.providers.gemini import GeminiModel, GeminiProvider


def _client(text: str | None = None, error: Exception | None = None) -> MagicMock:
  client = MagicMock()
  usage = SimpleNamespace(prompt_token_count=10, candidates_token_count=5, total_token_count=15)
  client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text=text, usage_metadata=usage), side_effect=error)
  return client


@pytest.mark.anyio
async def test_generate_structured_parses_fenced_json() -> None:
  client = _client('```json\n{"response": "ok",}\n```')
  model = GeminiModel("gemini-2.0-flash", client=client)
  schema = {"type": "OBJECT", "properties": {"response": {"type": "STRING"}}}

  result = await model.generate_structured("Say ok", schema, [MediaPart(mime_type="image/png", data=b"\x89PNG")])

  assert result.content == {"response": "ok"}
  assert result.usage == {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
  kwargs = client.aio.models.generate_content.await_args.kwargs
  assert kwargs["model"] == "gemini-2.0-flash"
  assert kwargs["config"].response_mime_type == "application/json"
  assert kwargs["contents"][-1] == "Say ok"
  assert len(kwargs["contents"]) == 2


@pytest.mark.anyio
async def test_sdk_errors_are_wrapped() -> None:
  model = GeminiModel("gemini-2.0-flash", client=_client(error=RuntimeError("quota exceeded")))
  with pytest.raises(InferenceError, match="quota exceeded"):
    await model.generate_structured("x", {"type": "OBJECT"})


@pytest.mark.anyio
async def test_non_object_json_is_rejected() -> None:
  model = GeminiModel("gemini-2.0-flash", client=_client("[1, 2]"))
  with pytest.raises(InferenceError, match="expected an object"):
    await model.generate_structured("x", {"type": "OBJECT"})


@pytest.mark.anyio
async def test_invalid_json_is_rejected() -> None:
  model = GeminiModel("gemini-2.0-flash", client=_client("no json here"))
  with pytest.raises(InferenceError, match="invalid JSON"):
    await model.generate_structured("x", {"type": "OBJECT"})


@pytest.mark.anyio
async def test_generate_returns_text() -> None:
  model = GeminiModel("gemini-2.0-flash", client=_client("hello"))
  result = await model.generate("hi")
  assert result.content == "hello"


def test_model_requires_api_key_without_client() -> None:
  with pytest.raises(ValueError, match="GEMINI_API_KEY"):
    GeminiModel("gemini-2.0-flash")


def test_provider_rejects_unknown_models() -> None:
  with pytest.raises(ValueError, match="Unsupported Gemini model"):
    GeminiProvider(api_key="key").get_model("gpt-4o")
