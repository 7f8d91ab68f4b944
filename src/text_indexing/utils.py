from __future__ import annotations

import base64
from pathlib import PurePosixPath

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".bmp": "image/bmp",
}

WORD_EXTENSIONS = (".doc", ".docx")


def file_extension(file_name: str) -> str:
    return PurePosixPath(file_name or "").suffix.lower()


def content_type_for(file_name: str) -> str:
    """Infer content type from the file extension."""
    return CONTENT_TYPES.get(file_extension(file_name), "application/octet-stream")


def is_word_document(file_name: str) -> bool:
    return file_extension(file_name) in WORD_EXTENSIONS


def document_id(storage_path: str) -> str:
    """Stable, URL-safe index key for a storage path (base64url, padding stripped)."""
    return base64.urlsafe_b64encode(storage_path.encode("utf-8")).decode("ascii").rstrip("=")


def archive_path(file_name: str, prefix: str = "documentchunks") -> str:
    return f"{prefix.strip('/')}/{file_name}_extracted.txt"
