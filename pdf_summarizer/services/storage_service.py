"""Local disk storage for uploaded files."""

import os
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from pdf_summarizer.core.config import StorageSettings
from pdf_summarizer.core.exceptions import StorageError
from pdf_summarizer.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """Location and size of a saved upload."""

    stored_name: str
    path: str
    size: int


class StorageService:
    """Saves uploads under ``<upload_dir>/<user_id>/<uuid><ext>``."""

    def __init__(self, storage_settings: StorageSettings):
        self.upload_dir = Path(storage_settings.upload_dir)

    def save_bytes(self, content: bytes, user_id: str, original_name: str) -> StoredFile:
        """Write uploaded bytes to disk.

        Args:
            content: File contents
            user_id: Owner, used as the sub-directory name
            original_name: Client file name; only its extension is kept

        Returns:
            StoredFile describing the saved file

        Raises:
            StorageError: If the file cannot be written
        """
        extension = Path(original_name).suffix.lower() or ".pdf"
        stored_name = f"{uuid4()}{extension}"
        user_dir = self.upload_dir / user_id

        try:
            user_dir.mkdir(parents=True, exist_ok=True)
            path = user_dir / stored_name
            path.write_bytes(content)
        except OSError as e:
            LOGGER.error(f"Error saving upload: {e}", exc_info=True, extra={"user_id": user_id})
            raise StorageError(f"Storage upload error: {e}", original_error=e) from e

        LOGGER.info(f"File stored: filename={original_name}, path={path}, size={len(content)}")
        return StoredFile(stored_name=stored_name, path=str(path), size=len(content))

    def delete_file(self, file_path: str) -> None:
        """Remove a stored file; a missing file is not an error."""
        try:
            os.remove(file_path)
        except FileNotFoundError:
            LOGGER.debug(f"File already removed: {file_path}")
        except OSError as e:
            raise StorageError(f"Failed to delete file {file_path}: {e}", original_error=e) from e

    def exists(self, file_path: str) -> bool:
        return os.path.isfile(file_path)
