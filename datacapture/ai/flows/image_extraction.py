"""Extract heading/value pairs and a full transcription from a photo."""

from __future__ import annotations

from pydantic import Field

from datacapture.ai.flows.base import CaptureFlow
from datacapture.schema.extraction import CamelModel, HeadingValueRow


class ExtractStructuredDataFromImageInput(CamelModel):
  photo_data_uri: str = Field(description="A photo of a document as a data URI: 'data:<mimetype>;base64,<encoded_data>'.")


class ExtractStructuredDataFromImageOutput(CamelModel):
  table: list[HeadingValueRow] = Field(default_factory=list)
  full_text: str = ""


class ExtractStructuredDataFromImageFlow(CaptureFlow[ExtractStructuredDataFromImageInput, ExtractStructuredDataFromImageOutput]):
  name = "extractStructuredDataFromImage"
  prompt_name = "extract_image"
  output_model = ExtractStructuredDataFromImageOutput
  output_fields = ("table", "fullText")
  response_schema = {
    "type": "OBJECT",
    "properties": {
      "table": {
        "type": "ARRAY",
        "description": "Structured data as heading/value rows. Empty when no structured data is found.",
        "items": {
          "type": "OBJECT",
          "properties": {"heading": {"type": "STRING", "description": "The heading of the row."}, "value": {"type": "STRING", "description": "The value associated with the heading."}},
          "required": ["heading", "value"],
        },
      },
      "fullText": {"type": "STRING", "description": "All recognizable text in the image. Empty when no text is found."},
    },
    "required": ["table", "fullText"],
  }

  def media_uris(self, input_data: ExtractStructuredDataFromImageInput) -> list[str]:
    return [input_data.photo_data_uri]
