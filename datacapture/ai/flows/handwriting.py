"""Transcribe handwriting from a photo."""

from __future__ import annotations

from pydantic import Field

from datacapture.ai.flows.base import CaptureFlow
from datacapture.schema.extraction import CamelModel


class TranscribeHandwritingInput(CamelModel):
  photo_data_uri: str = Field(description="A photo of handwritten text as a data URI.")


class TranscribeHandwritingOutput(CamelModel):
  transcribed_text: str = ""


class TranscribeHandwritingFlow(CaptureFlow[TranscribeHandwritingInput, TranscribeHandwritingOutput]):
  name = "transcribeHandwriting"
  prompt_name = "transcribe_handwriting"
  output_model = TranscribeHandwritingOutput
  output_fields = ("transcribedText",)
  response_schema = {
    "type": "OBJECT",
    "properties": {"transcribedText": {"type": "STRING", "description": "The handwritten text, transcribed verbatim with line breaks preserved. Empty when nothing is legible."}},
    "required": ["transcribedText"],
  }

  def media_uris(self, input_data: TranscribeHandwritingInput) -> list[str]:
    return [input_data.photo_data_uri]
