"""Model selection for the capture flows."""

from __future__ import annotations

import logging
from functools import lru_cache

from datacapture.ai.providers.base import AIModel
from datacapture.ai.providers.gemini import GeminiProvider
from datacapture.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_capture_model() -> AIModel:
  """Return the configured model client, built once per process."""
  settings = get_settings()
  provider = GeminiProvider(api_key=settings.gemini_api_key)
  model = provider.get_model(settings.model_name)
  logger.info("Capture model initialized provider=%s model=%s", provider.name, model.name)
  return model
