"""Schema package exports."""

from datacapture.schema.extraction import (
  EXTRACTION_CONTRACT_VERSION,
  ExtractedTable,
  ExtractionResult,
  HeadingValuePairs,
  HeadingValueRow,
  OutputData,
  OutputType,
  ResultEnvelope,
  ResultType,
  TableOnly,
  TableWithText,
  adapt_extraction,
)
from datacapture.schema.normalizer import normalize_inference_result, normalize_table

__all__ = [
  "EXTRACTION_CONTRACT_VERSION",
  "ExtractedTable",
  "ExtractionResult",
  "HeadingValuePairs",
  "HeadingValueRow",
  "OutputData",
  "OutputType",
  "ResultEnvelope",
  "ResultType",
  "TableOnly",
  "TableWithText",
  "adapt_extraction",
  "normalize_inference_result",
  "normalize_table",
]
