from __future__ import annotations

import io
import os
import subprocess
import tempfile
from typing import Protocol

from azure.ai.documentintelligence import DocumentIntelligenceClient
from azure.core.exceptions import AzureError
from loguru import logger

from src.text_indexing.utils import file_extension, is_word_document
from src.utils.errors import ExtractError


class ContentExtractor(Protocol):
    def extract(self, data: bytes, format_hint: str) -> str: ...


def convert_word_to_pdf(word_bytes: bytes, file_name: str) -> bytes:
    """
    Convert DOC/DOCX to PDF using libreoffice. Requires libreoffice-headless.
    """
    ext = file_extension(file_name) or ".docx"
    with tempfile.TemporaryDirectory() as tmpdir:
        src_path = os.path.join(tmpdir, f"input{ext}")
        pdf_path = os.path.join(tmpdir, "input.pdf")
        with open(src_path, "wb") as f:
            f.write(word_bytes)

        try:
            subprocess.run(
                ["libreoffice", "--headless", "--convert-to", "pdf", "--outdir", tmpdir, src_path],
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise RuntimeError(
                "libreoffice not found. Install libreoffice-headless for DOC/DOCX->PDF conversion."
            ) from exc
        with open(pdf_path, "rb") as f:
            return f.read()


def prepare_for_extraction(data: bytes, file_name: str) -> bytes:
    """Word documents are converted to PDF first; without a converter the original bytes are used."""
    if not is_word_document(file_name):
        return data
    logger.info("Converting {} to PDF for better extraction", file_name)
    try:
        return convert_word_to_pdf(data, file_name)
    except (RuntimeError, OSError, subprocess.CalledProcessError) as exc:
        logger.warning("DOC/DOCX to PDF conversion unavailable for {} ({}); extracting original bytes", file_name, exc)
        return data


class DocumentIntelligenceExtractor:
    """Plain-text extraction with the Document Intelligence ``prebuilt-read`` model."""

    model_id = "prebuilt-read"

    def __init__(self, client: DocumentIntelligenceClient, timeout_seconds: float = 300.0) -> None:
        self.client = client
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_endpoint(cls, endpoint: str, credential, timeout_seconds: float = 300.0) -> "DocumentIntelligenceExtractor":
        return cls(DocumentIntelligenceClient(endpoint=endpoint, credential=credential), timeout_seconds)

    def extract(self, data: bytes, format_hint: str) -> str:
        payload = prepare_for_extraction(data, format_hint)
        try:
            poller = self.client.begin_analyze_document(
                self.model_id,
                io.BytesIO(payload),
                content_type="application/octet-stream",
            )
            poller.wait(timeout=self.timeout_seconds)
            if not poller.done():
                raise ExtractError(
                    f"Document Intelligence did not finish {format_hint} within {self.timeout_seconds:.0f}s.",
                    error_code="ExtractionTimeout",
                )
            result = poller.result()
        except AzureError as exc:
            raise ExtractError(f"Document Intelligence failed for {format_hint}: {exc.message}") from exc
        text = getattr(result, "content", None) or ""
        logger.info("Document Intelligence extracted {} characters from {}", len(text), format_hint)
        return text
