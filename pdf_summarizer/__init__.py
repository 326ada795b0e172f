"""PDF upload, text extraction and AI summarization service."""

__version__ = "0.1.0"
