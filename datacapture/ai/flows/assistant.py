"""General assistant answering typed or dictated queries."""

from __future__ import annotations

from pydantic import Field

from datacapture.ai.flows.base import CaptureFlow
from datacapture.schema.extraction import CamelModel


class AiAssistantInput(CamelModel):
  query: str = Field(min_length=1)


class AiAssistantOutput(CamelModel):
  response: str = ""


class AiAssistantFlow(CaptureFlow[AiAssistantInput, AiAssistantOutput]):
  name = "aiAssistant"
  prompt_name = "assistant"
  output_model = AiAssistantOutput
  output_fields = ("response",)
  response_schema = {"type": "OBJECT", "properties": {"response": {"type": "STRING", "description": "The answer to the user's query."}}, "required": ["response"]}

  def media_uris(self, input_data: AiAssistantInput) -> list[str]:
    return []

  def prompt_values(self, input_data: AiAssistantInput) -> dict[str, str]:
    return {"query": input_data.query}
