# campus_complaints/services/file/__init__.py
"""
Attachment storage.
"""

from campus_complaints.services.file.file_storage import (
    PUBLIC_PREFIX,
    FileStorage,
    LocalFileStorage,
    UploadedFile,
)

__all__ = ["FileStorage", "LocalFileStorage", "UploadedFile", "PUBLIC_PREFIX"]
