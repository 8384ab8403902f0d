"""Schema-constrained prompts used by the capture dispatcher."""

from datacapture.ai.flows.assistant import AiAssistantFlow, AiAssistantInput, AiAssistantOutput
from datacapture.ai.flows.document_analysis import AnalyzeUploadedDocumentFlow, AnalyzeUploadedDocumentInput, AnalyzeUploadedDocumentOutput
from datacapture.ai.flows.handwriting import TranscribeHandwritingFlow, TranscribeHandwritingInput, TranscribeHandwritingOutput
from datacapture.ai.flows.image_extraction import ExtractStructuredDataFromImageFlow, ExtractStructuredDataFromImageInput, ExtractStructuredDataFromImageOutput

__all__ = [
  "AiAssistantFlow",
  "AiAssistantInput",
  "AiAssistantOutput",
  "AnalyzeUploadedDocumentFlow",
  "AnalyzeUploadedDocumentInput",
  "AnalyzeUploadedDocumentOutput",
  "ExtractStructuredDataFromImageFlow",
  "ExtractStructuredDataFromImageInput",
  "ExtractStructuredDataFromImageOutput",
  "TranscribeHandwritingFlow",
  "TranscribeHandwritingInput",
  "TranscribeHandwritingOutput",
]
