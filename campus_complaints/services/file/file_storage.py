# campus_complaints/services/file/file_storage.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Protocol
from uuid import uuid4

from campus_complaints.config.settings import Settings, get_settings
from campus_complaints.core.exceptions import ErrorCode, ValidationError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


@dataclass(frozen=True)
class UploadedFile:
    """File received from the boundary layer."""

    filename: str
    content: bytes


class FileStorage(Protocol):
    """
    Storage for complaint attachments.

    Implementations persist the bytes and return an opaque path that is
    stored on the attachment row as-is.
    """

    def save(self, filename: str, content: bytes) -> str:
        ...

    def delete(self, path: str) -> bool:
        ...


class LocalFileStorage:
    """
    Stores attachments on the local disk.

    Files are written as ``<uuid4 hex>_<basename>`` under ``upload_dir`` and
    exposed as ``/uploads/<name>``.
    """

    def __init__(
        self,
        upload_dir: str | os.PathLike[str],
        *,
        max_size: int,
        allowed_extensions: Optional[Iterable[str]] = None,
    ) -> None:
        self._upload_dir = Path(upload_dir)
        self._max_size = max_size
        self._allowed = (
            {ext.lstrip(".").lower() for ext in allowed_extensions}
            if allowed_extensions is not None
            else None
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LocalFileStorage":
        settings = settings or get_settings()
        return cls(
            settings.UPLOAD_DIR,
            max_size=settings.MAX_UPLOAD_SIZE,
            allowed_extensions=settings.ALLOWED_EXTENSIONS,
        )

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def _validate(self, basename: str, content: bytes) -> None:
        if not basename:
            raise ValidationError("Attachment has no file name", field="attachment", error_code=ErrorCode.INVALID_FILE)
        if not content:
            raise ValidationError("Attachment is empty", field="attachment", error_code=ErrorCode.INVALID_FILE)
        if len(content) > self._max_size:
            raise ValidationError(
                f"Attachment exceeds the {self._max_size} byte limit",
                field="attachment",
                error_code=ErrorCode.INVALID_FILE,
            )
        if self._allowed is not None:
            extension = Path(basename).suffix.lstrip(".").lower()
            if extension not in self._allowed:
                raise ValidationError(
                    f"File type '.{extension}' is not allowed" if extension else "File has no extension",
                    field="attachment",
                    error_code=ErrorCode.INVALID_FILE,
                )

    def save(self, filename: str, content: bytes) -> str:
        """
        Write ``content`` and return its public path.

        Raises:
            ValidationError: Empty, oversized or disallowed file
        """
        # Client names may carry directories, including Windows ones.
        basename = Path(filename.replace("\\", "/")).name if filename else ""
        self._validate(basename, content)

        stored_name = f"{uuid4().hex}_{basename}"
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        (self._upload_dir / stored_name).write_bytes(content)

        logger.info(f"Stored attachment {stored_name} ({len(content)} bytes)")
        return f"{PUBLIC_PREFIX}/{stored_name}"

    def delete(self, path: str) -> bool:
        """
        Remove a file previously returned by ``save``.

        Returns:
            True if a file was removed, False if it was already gone
        """
        stored_name = Path(path).name
        if not stored_name:
            return False
        target = self._upload_dir / stored_name
        if not target.is_file():
            logger.warning(f"Attachment {path} not found for deletion")
            return False
        target.unlink()
        logger.info(f"Deleted attachment {stored_name}")
        return True


__all__ = ["FileStorage", "LocalFileStorage", "UploadedFile", "PUBLIC_PREFIX"]
