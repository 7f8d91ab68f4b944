"""Search router."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_index_writer
from schemas.common import ErrorResponse
from schemas.search import SearchBody, SearchResponse
from services.search_service import DEFAULT_PAGE_SIZE, search_documents
from src.text_indexing.search_writer import SearchIndexWriter

router = APIRouter()


@router.get("/documentsearch", response_model=SearchResponse, responses={400: {"model": ErrorResponse}})
async def document_search(
    q: Optional[str] = None,
    project: Optional[str] = None,
    category: Optional[str] = None,
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    skip: int = 0,
    index: SearchIndexWriter = Depends(get_index_writer),
):
    """Search documents: ``?q=...&project=...&category=...&pageSize=20&skip=0``."""
    return await search_documents(index, q, project, category, page_size, skip)


@router.post("/documentsearch", response_model=SearchResponse, responses={400: {"model": ErrorResponse}})
async def document_search_post(
    body: Optional[SearchBody] = None,
    q: Optional[str] = None,
    project: Optional[str] = None,
    category: Optional[str] = None,
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    skip: int = 0,
    index: SearchIndexWriter = Depends(get_index_writer),
):
    """Search documents with ``{"query": "..."}``; a ``q`` query parameter takes precedence."""
    query = q or (body.query if body else None)
    return await search_documents(index, query, project, category, page_size, skip)
