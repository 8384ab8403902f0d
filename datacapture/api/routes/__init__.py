"""API route modules."""

from datacapture.api.routes import capture, export

__all__ = ["capture", "export"]
