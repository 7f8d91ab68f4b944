"""Error taxonomy for the ingestion pipeline.

Every error carries a machine-readable ``error_code``, a human ``message`` and
the HTTP ``status_code`` the API layer answers with. Fatal errors
(``ValidationError``, ``StoreError``, ``PayloadTooLarge``) abort a run;
``ExtractError`` and ``SearchIndexError`` only degrade it.
"""
from __future__ import annotations

from typing import Optional


class IngestionError(Exception):
    """Base class for every error raised by the ingestion pipeline."""

    status_code: int = 500
    default_code: str = "IngestionError"

    def __init__(self, message: str, error_code: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.error_code, "message": self.message}


class ValidationError(IngestionError):
    """Bad or missing input. Never retried."""

    status_code = 400
    default_code = "InvalidRequest"

    def __init__(self, message: str, error_code: Optional[str] = None, field: Optional[str] = None) -> None:
        super().__init__(message, error_code=error_code)
        self.field = field


class StoreError(IngestionError):
    """Object store failure on the durability path."""

    default_code = "StorageFailed"


class PayloadTooLarge(IngestionError):
    status_code = 413
    default_code = "FileTooLarge"

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"File size {size} bytes exceeds {limit // (1024 * 1024)} MB limit.")
        self.size = size
        self.limit = limit


class ExtractError(IngestionError):
    """Content extraction failed or timed out. Degrades to empty text."""

    status_code = 502
    default_code = "DocumentIntelligenceFailed"


class SearchIndexError(IngestionError):
    """Search index upsert or query failed."""

    status_code = 502
    default_code = "SearchFailed"
