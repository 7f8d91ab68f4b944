from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

from src.utils.errors import ValidationError


@dataclass(frozen=True)
class IngestionRequest:
    """One validated upload, produced by intake and owned by a single pipeline run."""

    project_id: str
    file_name: str
    content: bytes
    category_id: str = ""
    notes: str = ""

    @property
    def relative_path(self) -> str:
        return f"{self.project_id}/{self.file_name}"

    def tags(self) -> Dict[str, str]:
        return {"projectId": self.project_id, "categoryId": self.category_id, "notes": self.notes}


@dataclass(frozen=True)
class StoredObjectRef:
    """Durable location of an uploaded object: account, container and path inside it."""

    account_scope: str
    container_scope: str
    relative_path: str

    @property
    def uri(self) -> str:
        return f"{self.account_scope}/{self.container_scope}/{self.relative_path}"

    @property
    def file_name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def project_id(self) -> str:
        return self.relative_path.split("/", 1)[0] if "/" in self.relative_path else ""

    @classmethod
    def from_uri(cls, uri: str) -> "StoredObjectRef":
        """
        Parse https://{account}.dfs.core.windows.net/{container}/{project}/{file}.
        The relative path is percent-decoded so names with spaces round-trip.
        """
        parsed = urlparse((uri or "").strip())
        segments = [s for s in parsed.path.split("/") if s]
        if not parsed.scheme or not parsed.netloc or len(segments) < 2:
            raise ValidationError(
                f"filePath '{uri}' is not a full object URI (https://<account>/<container>/<path>).",
                error_code="InvalidFilePath",
                field="filePath",
            )
        return cls(
            account_scope=f"{parsed.scheme}://{parsed.netloc}",
            container_scope=segments[0],
            relative_path=unquote("/".join(segments[1:])),
        )


@dataclass
class StoredProperties:
    size: int
    content_type: str
    last_modified: Optional[datetime]
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class ExtractionResult:
    text: str
    source_file_name: str


@dataclass
class IndexDocument:
    id: str
    content: str
    storage_path: str
    storage_name: str
    storage_size_bytes: int
    storage_content_type: str
    last_modified: Optional[datetime]
    project_id: str
    category_id: str
    notes: str

    def to_search_document(self) -> Dict[str, Any]:
        """Field names as declared in the search index schema."""
        return {
            "id": self.id,
            "content": self.content,
            "metadata_storage_path": self.storage_path,
            "metadata_storage_name": self.storage_name,
            "metadata_storage_size": self.storage_size_bytes,
            "metadata_storage_content_type": self.storage_content_type,
            "metadata_storage_last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "projectId": self.project_id,
            "categoryId": self.category_id,
            "notes": self.notes,
        }


@dataclass
class SearchFilters:
    project_id: Optional[str] = None
    category_id: Optional[str] = None


@dataclass
class SearchHit:
    score: float
    path: Optional[str]
    file_name: Optional[str]
    project_id: Optional[str]
    category_id: Optional[str]
    notes: Optional[str]
    highlights: Optional[List[str]] = None


@dataclass
class SearchPage:
    total_count: int
    hits: List[SearchHit] = field(default_factory=list)
