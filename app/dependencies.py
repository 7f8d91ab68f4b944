"""Shared FastAPI dependencies.

Azure clients are built once per process from settings and handed to the
pipeline explicitly; tests replace them through ``app.dependency_overrides``.
"""
from functools import lru_cache

from azure.core.credentials import AzureKeyCredential
from azure.identity import DefaultAzureCredential

from src.config.settings import Settings, get_settings
from src.orchestration.pipeline import IngestionPipeline
from src.text_indexing.extractor import DocumentIntelligenceExtractor
from src.text_indexing.search_writer import AzureSearchIndexWriter
from src.text_indexing.storage import AzureObjectStore


@lru_cache()
def get_app_settings() -> Settings:
    """Return cached settings instance for FastAPI dependency injection."""
    return get_settings()


@lru_cache(maxsize=1)
def get_credential() -> DefaultAzureCredential:
    settings = get_app_settings()
    if settings.adls_uami_client_id:
        return DefaultAzureCredential(managed_identity_client_id=settings.adls_uami_client_id)
    return DefaultAzureCredential()


@lru_cache(maxsize=1)
def get_object_store() -> AzureObjectStore:
    settings = get_app_settings()
    if settings.azure_storage_connection_string:
        return AzureObjectStore.from_connection_string(
            settings.azure_storage_connection_string,
            container=settings.adls_parent_container,
            account_url=settings.storage_account_url,
        )
    return AzureObjectStore.from_credential(
        settings.blob_account_url,
        get_credential(),
        container=settings.adls_parent_container,
        account_url=settings.storage_account_url,
    )


@lru_cache(maxsize=1)
def get_extractor() -> DocumentIntelligenceExtractor:
    settings = get_app_settings()
    credential = (
        AzureKeyCredential(settings.doc_intelligence_key) if settings.doc_intelligence_key else get_credential()
    )
    return DocumentIntelligenceExtractor.from_endpoint(
        settings.doc_intelligence_endpoint,
        credential,
        timeout_seconds=settings.extraction_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_index_writer() -> AzureSearchIndexWriter:
    settings = get_app_settings()
    credential = AzureKeyCredential(settings.search_api_key) if settings.search_api_key else get_credential()
    return AzureSearchIndexWriter.from_endpoint(settings.search_endpoint, settings.search_index_name, credential)


@lru_cache(maxsize=1)
def get_pipeline() -> IngestionPipeline:
    settings = get_app_settings()
    return IngestionPipeline(
        store=get_object_store(),
        extractor=get_extractor(),
        index=get_index_writer(),
        max_extraction_bytes=settings.max_extraction_bytes,
        archive_prefix=settings.archive_prefix,
    )
