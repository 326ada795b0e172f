"""PDF text extraction using pdfplumber."""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Dict

import pdfplumber

from pdf_summarizer.core.exceptions import ExtractionError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)

PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class ExtractedPDF:
    """Text and page information pulled from a PDF."""

    text: str
    page_count: int
    metadata: Dict[str, Any] = field(default_factory=dict)


def clean_text(text: str) -> str:
    """Normalize whitespace in extracted text.

    Collapses runs of spaces/tabs, limits blank lines to one, strips every
    line and the text as a whole.
    """
    if not text:
        return ""

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()


class PDFService:
    """Extracts plain text, page count and document info from PDF files."""

    def extract(self, file_path: str) -> ExtractedPDF:
        """Extract the text of every page.

        Args:
            file_path: Path to the PDF on disk

        Returns:
            ExtractedPDF with cleaned text, page count and metadata

        Raises:
            ExtractionError: If the file is missing, unreadable or not a PDF
        """
        LOGGER.info(f"Loading PDF: {file_path}")
        start_time = time.time()

        try:
            with pdfplumber.open(file_path) as pdf:
                page_texts = [page.extract_text() or "" for page in pdf.pages]
                page_count = len(pdf.pages)
                info = dict(pdf.metadata or {})
        except Exception as e:
            LOGGER.error(f"Error loading PDF {file_path}: {e}")
            raise ExtractionError(f"Failed to load PDF: {e}", original_error=e) from e

        text = clean_text(PAGE_SEPARATOR.join(page_texts))
        elapsed = time.time() - start_time

        LOGGER.info(
            f"Extracted {len(text)} characters from {page_count} pages in {elapsed:.2f}s",
            extra={"file_path": file_path, "page_count": page_count},
        )
        return ExtractedPDF(
            text=text,
            page_count=page_count,
            metadata={"source": file_path, "pdf": self._json_safe(info)},
        )

    @staticmethod
    def _json_safe(info: Dict[str, Any]) -> Dict[str, Any]:
        # PDF info values may be bytes or PDF objects; keep only printable values
        safe: Dict[str, Any] = {}
        for key, value in info.items():
            if isinstance(value, (str, int, float, bool)) or value is None:
                safe[str(key)] = value
            elif isinstance(value, bytes):
                safe[str(key)] = value.decode("utf-8", errors="replace")
            else:
                safe[str(key)] = str(value)
        return safe
