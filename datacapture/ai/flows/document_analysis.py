"""Analyze an uploaded document (PDF, spreadsheet, CSV) into a header/rows table."""

from __future__ import annotations

from pydantic import Field

from datacapture.ai.flows.base import CaptureFlow
from datacapture.schema.extraction import CamelModel, ExtractedTable

EXTRACTED_TABLE_SCHEMA = {
  "type": "OBJECT",
  "description": "The structured table data extracted from the document. If no table is found, return empty headers and rows.",
  "properties": {
    "headers": {"type": "ARRAY", "items": {"type": "STRING"}, "description": "Column headers of the extracted table, e.g. ['Order ID', 'Customer', 'Amount']. Empty when no table is found."},
    "rows": {"type": "ARRAY", "items": {"type": "ARRAY", "items": {"type": "STRING"}}, "description": "Rows of cell values in header order, e.g. [['101', 'John Doe', '25.50']]. Empty when no table is found."},
  },
  "required": ["headers", "rows"],
}


class AnalyzeUploadedDocumentInput(CamelModel):
  document_data_uri: str = Field(description="A document as a data URI: 'data:<mimetype>;base64,<encoded_data>'.")


class AnalyzeUploadedDocumentOutput(CamelModel):
  extracted_table: ExtractedTable = Field(default_factory=ExtractedTable)


class AnalyzeUploadedDocumentFlow(CaptureFlow[AnalyzeUploadedDocumentInput, AnalyzeUploadedDocumentOutput]):
  name = "analyzeUploadedDocument"
  prompt_name = "analyze_document"
  output_model = AnalyzeUploadedDocumentOutput
  output_fields = ("extractedTable",)
  response_schema = {"type": "OBJECT", "properties": {"extractedTable": EXTRACTED_TABLE_SCHEMA}, "required": ["extractedTable"]}

  def media_uris(self, input_data: AnalyzeUploadedDocumentInput) -> list[str]:
    return [input_data.document_data_uri]
