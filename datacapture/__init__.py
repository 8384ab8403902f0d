"""Data capture backend: AI extraction, normalization and table export."""

__version__ = "0.1.0"
