from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_EXTRACTION_BYTES = 30 * 1024 * 1024


class Settings(BaseSettings):
    """Centralized configuration loaded from environment variables or .env."""

    adls_account_name: str = Field("aids4alaskastate", alias="ADLS_ACCOUNT_NAME")
    adls_parent_container: str = Field("alaskadocuments", alias="ADLS_PARENT_CONTAINER")
    adls_account_url: Optional[str] = Field(None, alias="ADLS_ACCOUNT_URL")
    azure_storage_connection_string: Optional[str] = Field(None, alias="AZURE_STORAGE_CONNECTION_STRING")
    adls_uami_client_id: Optional[str] = Field(None, alias="ADLS_UAMI_CLIENT_ID")

    doc_intelligence_endpoint: str = Field(
        "https://alaska-document-intelligence.cognitiveservices.azure.com/",
        alias="DOC_INTELLIGENCE_ENDPOINT",
    )
    doc_intelligence_key: Optional[str] = Field(None, alias="DOC_INTELLIGENCE_KEY")
    extraction_timeout_seconds: float = Field(300.0, alias="EXTRACTION_TIMEOUT_SECONDS")
    max_extraction_bytes: int = Field(MAX_EXTRACTION_BYTES, alias="MAX_EXTRACTION_BYTES")
    archive_prefix: str = Field("documentchunks", alias="ARCHIVE_PREFIX")

    search_endpoint: str = Field("https://aisearch-2024.search.windows.net", alias="SEARCH_ENDPOINT")
    search_index_name: str = Field("alaska-documents", alias="SEARCH_INDEX_NAME")
    search_api_key: Optional[str] = Field(None, alias="SEARCH_API_KEY")

    followup_timeout_seconds: float = Field(300.0, alias="FOLLOWUP_TIMEOUT_SECONDS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def storage_account_url(self) -> str:
        """Account endpoint used both for client construction and stored object URIs."""
        return (self.adls_account_url or f"https://{self.adls_account_name}.dfs.core.windows.net").rstrip("/")

    @property
    def blob_account_url(self) -> str:
        # The blob SDK talks to the blob endpoint of the same hierarchical-namespace account.
        return self.storage_account_url.replace(".dfs.", ".blob.")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[arg-type]
