"""
Shared fixtures: in-memory stand-ins for the object store, the extractor and
the search index, plus a TestClient wired to them through dependency overrides.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from src.orchestration.pipeline import IngestionPipeline
from src.text_indexing.models import IndexDocument, SearchFilters, SearchHit, SearchPage, StoredObjectRef, StoredProperties
from src.utils.errors import ExtractError, SearchIndexError, StoreError

ACCOUNT_URL = "https://aids4alaskastate.dfs.core.windows.net"
CONTAINER = "alaskadocuments"


class FakeObjectStore:
    def __init__(self) -> None:
        self.account_url = ACCOUNT_URL
        self.container = CONTAINER
        self.objects: Dict[str, bytes] = {}
        self.props: Dict[str, StoredProperties] = {}
        self.fail_write_paths: Optional[set] = None
        self.put_calls: List[str] = []
        self.container_ensured = False

    def fail_writes(self, *prefixes: str) -> None:
        """Reject writes to paths starting with any prefix ('' rejects everything)."""
        self.fail_write_paths = set(prefixes) or {""}

    def ensure_container(self) -> None:
        self.container_ensured = True

    def ref_for(self, path: str) -> StoredObjectRef:
        return StoredObjectRef(account_scope=self.account_url, container_scope=self.container, relative_path=path)

    def put(self, path, data, tags=None, content_type=None) -> None:
        self.put_calls.append(path)
        if self.fail_write_paths is not None and any(path.startswith(p) for p in self.fail_write_paths):
            raise StoreError("This request is not authorized to perform this operation.", error_code="AuthorizationPermissionMismatch", status_code=403)
        self.objects[path] = bytes(data)
        self.props[path] = StoredProperties(
            size=len(data),
            content_type=content_type or "application/octet-stream",
            last_modified=datetime(2026, 1, 1, tzinfo=timezone.utc),
            metadata=dict(tags or {}),
        )

    def get(self, path: str) -> bytes:
        if path not in self.objects:
            raise StoreError(f"Object '{path}' not found.", error_code="NotFound", status_code=404)
        return self.objects[path]

    def properties(self, path: str) -> StoredProperties:
        if path not in self.props:
            raise StoreError(f"Object '{path}' not found.", error_code="NotFound", status_code=404)
        return self.props[path]


class FakeExtractor:
    def __init__(self, text: str = "hello") -> None:
        self.text = text
        self.error: Optional[ExtractError] = None
        self.calls: List[tuple] = []

    def extract(self, data: bytes, format_hint: str) -> str:
        self.calls.append((data, format_hint))
        if self.error is not None:
            raise self.error
        return self.text


class FakeSearchIndex:
    def __init__(self) -> None:
        self.documents: Dict[str, IndexDocument] = {}
        self.error: Optional[SearchIndexError] = None
        self.reject = False
        self.index_name = "alaska-documents"
        self.index_ensured = False

    def ensure_index(self) -> str:
        self.index_ensured = True
        return self.index_name

    def upsert(self, document: IndexDocument) -> bool:
        if self.error is not None:
            raise self.error
        if self.reject:
            return False
        self.documents[document.id] = document
        return True

    def search(self, query: str, filters: SearchFilters, top: int = 20, skip: int = 0) -> SearchPage:
        if self.error is not None:
            raise self.error
        matches = []
        for doc in self.documents.values():
            if filters.project_id and doc.project_id != filters.project_id:
                continue
            if filters.category_id and doc.category_id != filters.category_id:
                continue
            if query.lower() not in (doc.content + " " + doc.storage_name).lower():
                continue
            highlights = [doc.content.replace(query, f"<em>{query}</em>")] if query in doc.content else None
            matches.append(
                SearchHit(
                    score=1.0,
                    path=doc.storage_path,
                    file_name=doc.storage_name,
                    project_id=doc.project_id,
                    category_id=doc.category_id,
                    notes=doc.notes,
                    highlights=highlights,
                )
            )
        return SearchPage(total_count=len(matches), hits=matches[skip:skip + top])


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def pipeline(store, extractor, index) -> IngestionPipeline:
    return IngestionPipeline(store=store, extractor=extractor, index=index)


@pytest.fixture
def client(pipeline, store, index):
    from app.app import app
    from app.dependencies import get_index_writer, get_object_store, get_pipeline

    app.dependency_overrides[get_object_store] = lambda: store
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_index_writer] = lambda: index
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
