from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import HttpResponseError

from src.text_indexing.models import IndexDocument, SearchFilters
from src.text_indexing.search_writer import AzureSearchIndexWriter, build_filter, build_index
from src.utils.errors import SearchIndexError


class PagedResults(list):
    def __init__(self, items, count):
        super().__init__(items)
        self._count = count

    def get_count(self):
        return self._count


def _document() -> IndexDocument:
    return IndexDocument(
        id="abc",
        content="hello",
        storage_path="https://aids4alaskastate.dfs.core.windows.net/alaskadocuments/ProjectA/report.pdf",
        storage_name="report.pdf",
        storage_size_bytes=5,
        storage_content_type="application/pdf",
        last_modified=datetime(2026, 1, 1, tzinfo=timezone.utc),
        project_id="ProjectA",
        category_id="CategoryA1",
        notes="",
    )


@pytest.mark.parametrize(
    "filters, expected",
    [
        (SearchFilters(), None),
        (SearchFilters(project_id="ProjectA"), "projectId eq 'ProjectA'"),
        (SearchFilters(category_id="CategoryA1"), "categoryId eq 'CategoryA1'"),
        (
            SearchFilters(project_id="ProjectA", category_id="CategoryA1"),
            "projectId eq 'ProjectA' and categoryId eq 'CategoryA1'",
        ),
        (SearchFilters(project_id="O'Brien"), "projectId eq 'O''Brien'"),
    ],
)
def test_build_filter(filters, expected):
    assert build_filter(filters) == expected


def test_index_schema_fields():
    index = build_index("alaska-documents")
    names = [f.name for f in index.fields]
    assert names[0] == "id"
    assert {"content", "metadata_storage_path", "metadata_storage_name", "projectId", "categoryId", "notes"} <= set(names)
    assert index.fields[0].key


def test_upsert_merges_document():
    client = MagicMock()
    client.merge_or_upload_documents.return_value = [SimpleNamespace(succeeded=True, error_message=None)]
    writer = AzureSearchIndexWriter(client, "alaska-documents")

    assert writer.upsert(_document()) is True
    sent = client.merge_or_upload_documents.call_args.kwargs["documents"]
    assert sent[0]["id"] == "abc"
    assert sent[0]["metadata_storage_name"] == "report.pdf"


def test_upsert_rejected_document_returns_false():
    client = MagicMock()
    client.merge_or_upload_documents.return_value = [SimpleNamespace(succeeded=False, error_message="bad field")]
    assert AzureSearchIndexWriter(client, "alaska-documents").upsert(_document()) is False


def test_upsert_service_error():
    client = MagicMock()
    client.merge_or_upload_documents.side_effect = HttpResponseError(message="Service unavailable")
    with pytest.raises(SearchIndexError) as exc_info:
        AzureSearchIndexWriter(client, "alaska-documents").upsert(_document())
    assert exc_info.value.error_code == "IndexingFailed"


def test_search_maps_results_and_options():
    client = MagicMock()
    client.search.return_value = PagedResults(
        [
            {
                "@search.score": 2.5,
                "@search.highlights": {"content": ["<em>hello</em>"]},
                "metadata_storage_path": "https://acct/alaskadocuments/ProjectA/report.pdf",
                "metadata_storage_name": "report.pdf",
                "projectId": "ProjectA",
                "categoryId": "CategoryA1",
                "notes": "n",
            },
            {"@search.score": 1.0, "metadata_storage_name": "other.pdf", "projectId": "ProjectA"},
        ],
        count=7,
    )
    writer = AzureSearchIndexWriter(client, "alaska-documents")

    page = writer.search("hello", SearchFilters(project_id="ProjectA"), top=2, skip=4)

    kwargs = client.search.call_args.kwargs
    assert kwargs["search_text"] == "hello"
    assert kwargs["filter"] == "projectId eq 'ProjectA'"
    assert kwargs["top"] == 2 and kwargs["skip"] == 4
    assert kwargs["include_total_count"] is True
    assert kwargs["highlight_fields"] == "content"
    assert page.total_count == 7
    assert page.hits[0].score == 2.5
    assert page.hits[0].highlights == ["<em>hello</em>"]
    assert page.hits[1].highlights is None
    assert page.hits[1].file_name == "other.pdf"


def test_search_total_falls_back_to_hit_count():
    client = MagicMock()
    client.search.return_value = PagedResults([{"@search.score": 1.0}], count=None)
    page = AzureSearchIndexWriter(client, "alaska-documents").search("x", SearchFilters())
    assert page.total_count == 1
    assert client.search.call_args.kwargs["filter"] is None


def test_search_service_error():
    client = MagicMock()
    client.search.side_effect = HttpResponseError(message="Invalid expression")
    with pytest.raises(SearchIndexError) as exc_info:
        AzureSearchIndexWriter(client, "alaska-documents").search("x", SearchFilters())
    assert exc_info.value.error_code == "SearchFailed"


def test_ensure_index_without_index_client():
    with pytest.raises(SearchIndexError) as exc_info:
        AzureSearchIndexWriter(MagicMock(), "alaska-documents").ensure_index()
    assert exc_info.value.error_code == "IndexSetupFailed"
