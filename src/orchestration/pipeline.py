"""
Ingestion pipeline: store -> extract -> archive -> index.

Only the store stage decides whether an upload succeeded. Extraction, the
archival text copy and the index upsert are best-effort: their failures are
logged and recorded on the ``IngestionOutcome`` and the run carries on with
whatever content it has. ``process_stored`` can be re-run for an object that is
already stored, without re-uploading it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from loguru import logger

from src.config.settings import MAX_EXTRACTION_BYTES
from src.text_indexing.extractor import ContentExtractor
from src.text_indexing.models import ExtractionResult, IndexDocument, IngestionRequest, StoredObjectRef, StoredProperties
from src.text_indexing.search_writer import SearchIndexWriter
from src.text_indexing.storage import ObjectStore
from src.text_indexing.utils import archive_path, content_type_for, document_id
from src.utils.errors import ExtractError, PayloadTooLarge, SearchIndexError, StoreError


class Stage(str, Enum):
    VALIDATED = "validated"
    STORED = "stored"
    EXTRACTED = "extracted"
    ARCHIVED = "archived"
    INDEXED = "indexed"


@dataclass
class StageFailure:
    stage: Stage
    reason: str


@dataclass
class IngestionOutcome:
    ref: StoredObjectRef
    stage: Stage = Stage.STORED
    extracted_characters: int = 0
    archive_path: Optional[str] = None
    indexed: bool = False
    failures: List[StageFailure] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.failures)

    def fail(self, stage: Stage, reason: str) -> None:
        self.failures.append(StageFailure(stage=stage, reason=reason))


class IngestionPipeline:
    """Drives one ingestion run against injected store, extractor and index clients."""

    def __init__(
        self,
        store: ObjectStore,
        extractor: ContentExtractor,
        index: SearchIndexWriter,
        max_extraction_bytes: int = MAX_EXTRACTION_BYTES,
        archive_prefix: str = "documentchunks",
    ) -> None:
        self.store = store
        self.extractor = extractor
        self.index = index
        self.max_extraction_bytes = max_extraction_bytes
        self.archive_prefix = archive_prefix

    def ingest(self, request: IngestionRequest) -> IngestionOutcome:
        ref = self.store_document(request)
        return self.process_stored(ref)

    def store_document(self, request: IngestionRequest) -> StoredObjectRef:
        """Overwrite ``project/file`` with the request bytes. Raises StoreError."""
        path = request.relative_path
        self.store.put(path, request.content, tags=request.tags(), content_type=content_type_for(request.file_name))
        logger.info(
            "Stored {} ({} bytes) projectId={} categoryId={}",
            path,
            len(request.content),
            request.project_id,
            request.category_id,
        )
        return self.store.ref_for(path)

    def process_stored(self, ref: StoredObjectRef, notes: Optional[str] = None) -> IngestionOutcome:
        """
        Extract, archive and index an object that is already stored.

        Raises StoreError when the object cannot be read and PayloadTooLarge when it
        exceeds the extraction limit; every later failure is recorded on the outcome.
        """
        outcome = IngestionOutcome(ref=ref)
        properties = self.store.properties(ref.relative_path)

        extraction = self._extract(ref, properties, outcome)

        if extraction.text.strip():
            self._archive(extraction, outcome)
        else:
            logger.warning("No extracted content for {}; skipping archive write", ref.relative_path)

        document = self.build_document(ref, properties, extraction.text, notes)
        try:
            outcome.indexed = self.index.upsert(document)
        except SearchIndexError as exc:
            logger.error("Indexing failed for {}: {}", ref.relative_path, exc.message)
            outcome.fail(Stage.INDEXED, exc.message)
        else:
            if outcome.indexed:
                outcome.stage = Stage.INDEXED
                logger.info("Indexed {} as {}", ref.relative_path, document.id)
            else:
                outcome.fail(Stage.INDEXED, "Index rejected the document")
        return outcome

    def _extract(self, ref: StoredObjectRef, properties: StoredProperties, outcome: IngestionOutcome) -> ExtractionResult:
        if properties.size > self.max_extraction_bytes:
            raise PayloadTooLarge(properties.size, self.max_extraction_bytes)
        data = self.store.get(ref.relative_path)
        if len(data) > self.max_extraction_bytes:
            raise PayloadTooLarge(len(data), self.max_extraction_bytes)
        try:
            text = self.extractor.extract(data, ref.file_name)
        except ExtractError as exc:
            logger.error("Extraction failed for {}: {}", ref.relative_path, exc.message)
            outcome.fail(Stage.EXTRACTED, exc.message)
            return ExtractionResult(text="", source_file_name=ref.file_name)
        outcome.stage = Stage.EXTRACTED
        outcome.extracted_characters = len(text)
        return ExtractionResult(text=text, source_file_name=ref.file_name)

    def _archive(self, extraction: ExtractionResult, outcome: IngestionOutcome) -> None:
        path = archive_path(extraction.source_file_name, self.archive_prefix)
        try:
            self.store.put(path, extraction.text.encode("utf-8"), content_type="text/plain; charset=utf-8")
        except StoreError as exc:
            logger.warning("Could not write extracted content to {}: {}", path, exc.message)
            outcome.fail(Stage.ARCHIVED, exc.message)
            return
        outcome.stage = Stage.ARCHIVED
        outcome.archive_path = path
        logger.info("Extracted content written to {}", path)

    @staticmethod
    def build_document(
        ref: StoredObjectRef,
        properties: StoredProperties,
        text: str,
        notes: Optional[str] = None,
    ) -> IndexDocument:
        # Metadata names are case-insensitive in the store.
        tags = {k.lower(): v for k, v in properties.metadata.items()}
        return IndexDocument(
            id=document_id(ref.uri),
            content=text,
            storage_path=ref.uri,
            storage_name=ref.file_name,
            storage_size_bytes=properties.size,
            storage_content_type=properties.content_type,
            last_modified=properties.last_modified,
            project_id=tags.get("projectid") or ref.project_id,
            category_id=tags.get("categoryid", ""),
            notes=notes if notes else tags.get("notes", ""),
        )
