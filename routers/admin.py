"""Admin router: provisions the container and search index the pipeline writes into."""
from fastapi import APIRouter, Depends

from app.dependencies import get_index_writer, get_object_store
from schemas.ingestion import IndexSetupResponse
from src.text_indexing.search_writer import AzureSearchIndexWriter
from src.text_indexing.storage import AzureObjectStore

router = APIRouter()


@router.post("/capturefilecontent", response_model=IndexSetupResponse)
def capture_file_content(
    store: AzureObjectStore = Depends(get_object_store),
    index: AzureSearchIndexWriter = Depends(get_index_writer),
):
    """Create the storage container if missing and create or update the search index schema."""
    store.ensure_container()
    name = index.ensure_index()
    return IndexSetupResponse(
        message="Storage container and search index created/updated successfully.",
        index=name,
        container=store.container,
    )
