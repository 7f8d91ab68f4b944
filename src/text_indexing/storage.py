from __future__ import annotations

from typing import Dict, Optional, Protocol

from azure.core.exceptions import AzureError, HttpResponseError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings
from loguru import logger

from src.text_indexing.models import StoredObjectRef, StoredProperties
from src.utils.errors import StoreError


class ObjectStore(Protocol):
    """Hierarchical byte store addressed by ``project/file`` paths."""

    def ref_for(self, path: str) -> StoredObjectRef: ...

    def put(self, path: str, data: bytes, tags: Optional[Dict[str, str]] = None, content_type: Optional[str] = None) -> None: ...

    def get(self, path: str) -> bytes: ...

    def properties(self, path: str) -> StoredProperties: ...


def _store_error(exc: AzureError, action: str, path: str) -> StoreError:
    if isinstance(exc, ResourceNotFoundError):
        return StoreError(f"Object '{path}' not found.", error_code="NotFound", status_code=404)
    status = getattr(exc, "status_code", None) if isinstance(exc, HttpResponseError) else None
    code = getattr(exc, "error_code", None) or type(exc).__name__
    return StoreError(f"Storage {action} failed for '{path}': {exc.message}", error_code=str(code), status_code=status or 500)


class AzureObjectStore:
    """
    Object store over one container of an ADLS Gen2 (hierarchical namespace) account.

    Writes are single ``upload_blob(overwrite=True)`` calls, so an object is either
    fully replaced or left as it was. Paths keep their ``/`` separators and show up
    as directories in the account.
    """

    def __init__(self, service: BlobServiceClient, container: str, account_url: str) -> None:
        self.service = service
        self.container = container
        self.account_url = account_url.rstrip("/")
        self.client = service.get_container_client(container)

    @classmethod
    def from_connection_string(cls, connection_string: str, container: str, account_url: str) -> "AzureObjectStore":
        return cls(BlobServiceClient.from_connection_string(connection_string), container, account_url)

    @classmethod
    def from_credential(cls, blob_account_url: str, credential, container: str, account_url: str) -> "AzureObjectStore":
        return cls(BlobServiceClient(account_url=blob_account_url, credential=credential), container, account_url)

    def ensure_container(self) -> None:
        try:
            self.client.create_container()
            logger.info("Created container '{}'", self.container)
        except ResourceExistsError:
            pass

    def ref_for(self, path: str) -> StoredObjectRef:
        return StoredObjectRef(account_scope=self.account_url, container_scope=self.container, relative_path=path)

    def put(
        self,
        path: str,
        data: bytes,
        tags: Optional[Dict[str, str]] = None,
        content_type: Optional[str] = None,
    ) -> None:
        blob_client = self.client.get_blob_client(path)
        settings = ContentSettings(content_type=content_type) if content_type else None
        try:
            blob_client.upload_blob(data, overwrite=True, metadata=tags or None, content_settings=settings)
        except AzureError as exc:
            logger.error("Upload of {} failed. Ensure the identity has 'Storage Blob Data Contributor' role: {}", path, exc)
            raise _store_error(exc, "write", path) from exc
        logger.debug("Stored {} bytes at {}/{}", len(data), self.container, path)

    def get(self, path: str) -> bytes:
        try:
            data = self.client.get_blob_client(path).download_blob().readall()
        except AzureError as exc:
            raise _store_error(exc, "read", path) from exc
        logger.debug("Read {} bytes from {}/{}", len(data), self.container, path)
        return data

    def properties(self, path: str) -> StoredProperties:
        try:
            props = self.client.get_blob_client(path).get_blob_properties()
        except AzureError as exc:
            raise _store_error(exc, "read", path) from exc
        content_settings = getattr(props, "content_settings", None)
        return StoredProperties(
            size=props.size,
            content_type=getattr(content_settings, "content_type", None) or "application/octet-stream",
            last_modified=props.last_modified,
            metadata=dict(props.metadata or {}),
        )
