"""Ingestion business logic service."""
import asyncio
from typing import Optional
from urllib.parse import urlparse

from loguru import logger

from schemas.ingestion import DocumentOperationsResponse
from src.orchestration.pipeline import IngestionOutcome, IngestionPipeline
from src.text_indexing.models import IngestionRequest, StoredObjectRef
from src.utils.errors import ValidationError


async def upload_document(pipeline: IngestionPipeline, request: IngestionRequest) -> StoredObjectRef:
    """
    Store the upload. This is the only step the caller waits for.

    Raises StoreError if the object could not be written.
    """
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, pipeline.store_document, request)


async def run_followup(
    pipeline: IngestionPipeline,
    ref: StoredObjectRef,
    notes: Optional[str] = None,
    timeout: float = 300.0,
) -> Optional[IngestionOutcome]:
    """
    Extract and index a freshly stored object after the upload response went out.

    Runs detached from the upload request: failures are logged and never reach
    the uploading client. The object stays stored and can be re-processed through
    the document operations endpoint.
    """
    loop = asyncio.get_event_loop()
    try:
        outcome = await asyncio.wait_for(
            loop.run_in_executor(None, pipeline.process_stored, ref, notes),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("Extraction/indexing of {} did not finish within {}s. File was uploaded successfully.", ref.relative_path, timeout)
        return None
    except Exception as exc:
        logger.opt(exception=exc).warning(
            "Extraction/indexing failed for {}. File was uploaded successfully; indexing can be retried.", ref.relative_path
        )
        return None

    if outcome.degraded:
        logger.warning(
            "Follow-up for {} finished degraded at stage {}: {}",
            ref.relative_path,
            outcome.stage.value,
            "; ".join(f"{f.stage.value}: {f.reason}" for f in outcome.failures),
        )
    else:
        logger.info("Follow-up for {} completed (indexed={})", ref.relative_path, outcome.indexed)
    return outcome


def _account_host(ref: StoredObjectRef) -> str:
    # dfs and blob endpoints address the same hierarchical-namespace account.
    return urlparse(ref.account_scope).netloc.lower().replace(".blob.", ".dfs.")


def resolve_stored_ref(pipeline: IngestionPipeline, file_path: str) -> StoredObjectRef:
    """
    Map a caller-supplied object URI onto the configured store.

    The URI must name the store's own account and container; the returned ref
    always carries the store's canonical URI so the index id stays stable.
    """
    requested = StoredObjectRef.from_uri(file_path)
    canonical = pipeline.store.ref_for(requested.relative_path)
    if (
        requested.container_scope != canonical.container_scope
        or _account_host(requested) != _account_host(canonical)
    ):
        raise ValidationError(
            f"filePath '{file_path}' is outside container '{canonical.container_scope}' "
            f"of account {canonical.account_scope}.",
            error_code="InvalidFilePath",
            field="filePath",
        )
    return canonical


async def process_document(pipeline: IngestionPipeline, file_path: str, notes: Optional[str] = None) -> DocumentOperationsResponse:
    """
    Re-run extraction, archival and indexing for a stored object addressed by its full URI.

    StoreError and PayloadTooLarge propagate; extraction and indexing problems are
    reflected in the response counts instead.
    """
    if not (file_path or "").strip():
        raise ValidationError("filePath is required.", error_code="MissingField", field="filePath")
    ref = resolve_stored_ref(pipeline, file_path)
    logger.info("Received file path: {}", file_path)

    loop = asyncio.get_event_loop()
    outcome = await loop.run_in_executor(None, pipeline.process_stored, ref, notes)

    if outcome.indexed:
        message = "Document processed and indexed."
    else:
        message = "Document processed; indexing did not complete and can be retried."
    return DocumentOperationsResponse(
        message=message,
        file_name=ref.file_name,
        extracted_characters=outcome.extracted_characters,
        indexed=outcome.indexed,
    )
