"""Ingestion routers: file upload and document (re)processing."""
from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.dependencies import get_app_settings, get_pipeline
from schemas.common import ErrorResponse
from schemas.ingestion import DocumentOperationsRequest, DocumentOperationsResponse
from services.ingestion_service import process_document, run_followup, upload_document
from services.intake import parse_upload
from src.config.settings import Settings
from src.orchestration.pipeline import IngestionPipeline

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/uploadfiles", response_model=str, responses=ERROR_RESPONSES)
async def upload_files(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: IngestionPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """
    Upload a file to the document store.

    Preferred: multipart/form-data with ``file``, ``projectId``, ``categoryId``, ``notes``.
    Legacy: JSON with base64 ``content`` for external API clients.

    The response is returned as soon as the file is stored. Extraction and
    indexing run afterwards in the background; their failures never turn a
    stored upload into an error.
    """
    ingestion_request = await parse_upload(request)
    ref = await upload_document(pipeline, ingestion_request)
    background_tasks.add_task(
        run_followup,
        pipeline,
        ref,
        ingestion_request.notes,
        settings.followup_timeout_seconds,
    )
    return f"File uploaded successfully to {ref.relative_path}"


@router.post("/calldocumentoperations", response_model=DocumentOperationsResponse, responses=ERROR_RESPONSES)
async def call_document_operations(
    body: DocumentOperationsRequest,
    pipeline: IngestionPipeline = Depends(get_pipeline),
):
    """
    Read a stored file, extract its content, archive the text and index it.

    Body: ``{"filePath": "https://<account>.dfs.core.windows.net/<container>/<project>/<file>", "notes": "..."}``
    """
    return await process_document(pipeline, body.file_path, body.notes)
