from __future__ import annotations

from typing import List, Optional, Protocol

from azure.core.exceptions import AzureError
from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import (
    LexicalAnalyzerName,
    SearchableField,
    SearchFieldDataType,
    SearchIndex,
    SimpleField,
)
from loguru import logger

from src.text_indexing.models import IndexDocument, SearchFilters, SearchHit, SearchPage
from src.utils.errors import SearchIndexError

SELECT_FIELDS = [
    "metadata_storage_path",
    "metadata_storage_name",
    "projectId",
    "categoryId",
    "notes",
    "content",
]


class SearchIndexWriter(Protocol):
    def upsert(self, document: IndexDocument) -> bool: ...

    def search(self, query: str, filters: SearchFilters, top: int = 20, skip: int = 0) -> SearchPage: ...


def _odata_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def build_filter(filters: SearchFilters) -> Optional[str]:
    """Equality predicates on projectId/categoryId joined with ``and``."""
    clauses = []
    if filters.project_id:
        clauses.append(f"projectId eq {_odata_literal(filters.project_id)}")
    if filters.category_id:
        clauses.append(f"categoryId eq {_odata_literal(filters.category_id)}")
    return " and ".join(clauses) or None


def build_index(name: str) -> SearchIndex:
    return SearchIndex(
        name=name,
        fields=[
            SimpleField(name="id", type=SearchFieldDataType.String, key=True, filterable=True),
            SearchableField(name="content", analyzer_name=LexicalAnalyzerName.EN_MICROSOFT),
            SimpleField(name="metadata_storage_path", type=SearchFieldDataType.String, filterable=True),
            SearchableField(name="metadata_storage_name", filterable=True, sortable=True),
            SimpleField(name="metadata_storage_size", type=SearchFieldDataType.Int64, filterable=True, sortable=True),
            SimpleField(
                name="metadata_storage_last_modified",
                type=SearchFieldDataType.DateTimeOffset,
                filterable=True,
                sortable=True,
            ),
            SimpleField(name="metadata_storage_content_type", type=SearchFieldDataType.String, filterable=True),
            SearchableField(name="projectId", filterable=True, facetable=True),
            SearchableField(name="categoryId", filterable=True, facetable=True),
            SearchableField(name="notes"),
        ],
    )


class AzureSearchIndexWriter:
    """Push-model writer and query client for one Azure AI Search index."""

    def __init__(self, client: SearchClient, index_name: str, index_client: Optional[SearchIndexClient] = None) -> None:
        self.client = client
        self.index_name = index_name
        self.index_client = index_client

    @classmethod
    def from_endpoint(cls, endpoint: str, index_name: str, credential) -> "AzureSearchIndexWriter":
        return cls(
            SearchClient(endpoint=endpoint, index_name=index_name, credential=credential),
            index_name,
            SearchIndexClient(endpoint=endpoint, credential=credential),
        )

    def ensure_index(self) -> str:
        if self.index_client is None:
            raise SearchIndexError("No index client configured; cannot create the index.", error_code="IndexSetupFailed")
        try:
            index = self.index_client.create_or_update_index(build_index(self.index_name))
        except AzureError as exc:
            raise SearchIndexError(f"Index setup failed: {exc.message}", error_code="IndexSetupFailed") from exc
        logger.info("Index '{}' created/updated", index.name)
        return index.name

    def upsert(self, document: IndexDocument) -> bool:
        try:
            results = self.client.merge_or_upload_documents(documents=[document.to_search_document()])
        except AzureError as exc:
            raise SearchIndexError(f"Indexing failed for {document.storage_name}: {exc.message}", error_code="IndexingFailed") from exc
        succeeded = all(r.succeeded for r in results)
        if not succeeded:
            errors = "; ".join(r.error_message or "" for r in results if not r.succeeded)
            logger.warning("Index upsert rejected for {}: {}", document.storage_name, errors)
        return succeeded

    def search(self, query: str, filters: SearchFilters, top: int = 20, skip: int = 0) -> SearchPage:
        odata_filter = build_filter(filters)
        logger.info("Searching index '{}' for query: '{}', filter: '{}'", self.index_name, query, odata_filter or "(none)")
        try:
            results = self.client.search(
                search_text=query,
                filter=odata_filter,
                top=top,
                skip=skip,
                include_total_count=True,
                query_type="simple",
                select=SELECT_FIELDS,
                highlight_fields="content",
            )
            hits: List[SearchHit] = []
            for result in results:
                highlights = (result.get("@search.highlights") or {}).get("content")
                hits.append(
                    SearchHit(
                        score=result.get("@search.score") or 0.0,
                        path=result.get("metadata_storage_path"),
                        file_name=result.get("metadata_storage_name"),
                        project_id=result.get("projectId"),
                        category_id=result.get("categoryId"),
                        notes=result.get("notes"),
                        highlights=highlights,
                    )
                )
            total = results.get_count()
        except AzureError as exc:
            raise SearchIndexError(f"Search operation failed: {exc.message}") from exc
        return SearchPage(total_count=total if total is not None else len(hits), hits=hits)
