"""Provider implementations."""

from datacapture.ai.providers.base import AIModel, InferenceError, MediaPart, Provider, SimpleModelResponse, StructuredModelResponse
from datacapture.ai.providers.gemini import GeminiModel, GeminiProvider

__all__ = ["AIModel", "InferenceError", "MediaPart", "Provider", "SimpleModelResponse", "StructuredModelResponse", "GeminiModel", "GeminiProvider"]
