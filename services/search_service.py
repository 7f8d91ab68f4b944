"""Search business logic service."""
import asyncio
from typing import Optional

from schemas.search import SearchResponse, SearchResultItem
from src.text_indexing.models import SearchFilters
from src.text_indexing.search_writer import SearchIndexWriter
from src.utils.errors import ValidationError

DEFAULT_PAGE_SIZE = 20


async def search_documents(
    index: SearchIndexWriter,
    query: Optional[str],
    project: Optional[str] = None,
    category: Optional[str] = None,
    page_size: int = DEFAULT_PAGE_SIZE,
    skip: int = 0,
) -> SearchResponse:
    """
    Run a full-text query with optional project/category filters.

    Raises ValidationError without a query and SearchIndexError when the index fails.
    """
    if not (query or "").strip():
        raise ValidationError(
            "Please provide a search query via 'q' query parameter or 'query' in the request body.",
            error_code="MissingQuery",
            field="q",
        )
    filters = SearchFilters(project_id=project or None, category_id=category or None)

    loop = asyncio.get_event_loop()
    page = await loop.run_in_executor(None, index.search, query, filters, max(page_size, 1), max(skip, 0))

    results = [
        SearchResultItem(
            score=hit.score,
            path=hit.path,
            file_name=hit.file_name,
            project_id=hit.project_id,
            category_id=hit.category_id,
            notes=hit.notes,
            highlights=hit.highlights,
        )
        for hit in page.hits
    ]
    return SearchResponse(query=query, total_count=page.total_count, count=len(results), results=results)
