"""Tests for PDF text extraction and upload storage."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pdf_summarizer.core.exceptions import ExtractionError
from pdf_summarizer.services.pdf_service import PDFService, clean_text
from pdf_summarizer.services.storage_service import StorageService


def fake_pdf(page_texts, metadata=None):
    pdf = MagicMock()
    pdf.pages = [MagicMock(**{"extract_text.return_value": text}) for text in page_texts]
    pdf.metadata = metadata or {}
    pdf.__enter__.return_value = pdf
    pdf.__exit__.return_value = False
    return pdf


class TestCleanText:
    def test_collapses_whitespace(self):
        raw = "  Title\t\t here  \n\n\n\nBody   line \n  next\t"
        assert clean_text(raw) == "Title here\n\nBody line\nnext"

    def test_empty(self):
        assert clean_text("") == ""


class TestPDFService:
    @patch("pdf_summarizer.services.pdf_service.pdfplumber.open")
    def test_extract_joins_pages(self, mock_open):
        mock_open.return_value = fake_pdf(
            ["Page one text.", None, "Page   three."],
            metadata={"Title": "Annual Report", "Producer": b"pdf-lib"},
        )

        result = PDFService().extract("/data/report.pdf")

        mock_open.assert_called_once_with("/data/report.pdf")
        assert result.page_count == 3
        assert result.text == "Page one text.\n\nPage three."
        assert result.metadata["source"] == "/data/report.pdf"
        assert result.metadata["pdf"] == {"Title": "Annual Report", "Producer": "pdf-lib"}

    @patch("pdf_summarizer.services.pdf_service.pdfplumber.open")
    def test_unreadable_file_raises_extraction_error(self, mock_open):
        mock_open.side_effect = ValueError("not a PDF")

        with pytest.raises(ExtractionError) as exc_info:
            PDFService().extract("/data/broken.pdf")
        assert "not a PDF" in exc_info.value.message
        assert isinstance(exc_info.value.original_error, ValueError)

    def test_missing_file_raises_extraction_error(self, tmp_path):
        with pytest.raises(ExtractionError):
            PDFService().extract(str(tmp_path / "missing.pdf"))


class TestStorageService:
    def test_save_bytes_under_user_directory(self, storage_settings):
        storage = StorageService(storage_settings)

        stored = storage.save_bytes(b"%PDF-1.4 data", "user-1", "Report.PDF")

        path = Path(stored.path)
        assert path.parent == Path(storage_settings.upload_dir) / "user-1"
        assert path.suffix == ".pdf"
        assert stored.stored_name == path.name
        assert stored.size == len(b"%PDF-1.4 data")
        assert path.read_bytes() == b"%PDF-1.4 data"
        assert storage.exists(stored.path)

    def test_names_are_unique(self, storage_settings):
        storage = StorageService(storage_settings)

        first = storage.save_bytes(b"a", "user-1", "same.pdf")
        second = storage.save_bytes(b"b", "user-1", "same.pdf")

        assert first.path != second.path

    def test_delete_tolerates_missing_file(self, storage_settings):
        storage = StorageService(storage_settings)
        stored = storage.save_bytes(b"a", "user-1", "doc.pdf")

        storage.delete_file(stored.path)
        storage.delete_file(stored.path)

        assert not storage.exists(stored.path)
