"""Upload intake: turn either wire format into one IngestionRequest."""
import base64
import binascii
import json
from pathlib import PurePosixPath
from typing import Any, Optional

from fastapi import Request
from loguru import logger
from pydantic import ValidationError as SchemaError

from schemas.ingestion import JsonUploadRequest
from src.text_indexing.models import IngestionRequest
from src.utils.errors import ValidationError


def is_json_request(content_type: Optional[str]) -> bool:
    return "application/json" in (content_type or "").lower()


def _base_name(file_name: str) -> str:
    return PurePosixPath((file_name or "").replace("\\", "/")).name


def _validated(project_id: str, file_name: str, content: bytes, category_id: str, notes: str) -> IngestionRequest:
    if not (project_id or "").strip():
        raise ValidationError("ProjectId is required.", error_code="MissingField", field="projectId")
    if not (file_name or "").strip():
        raise ValidationError("FileName is required.", error_code="MissingField", field="fileName")
    return IngestionRequest(
        project_id=project_id.strip(),
        file_name=file_name.strip(),
        content=content,
        category_id=category_id or "",
        notes=notes or "",
    )


def build_from_json(payload: Any) -> IngestionRequest:
    """Validate a legacy JSON upload body (already parsed) and decode its base64 content."""
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.", error_code="InvalidRequest")
    try:
        body = JsonUploadRequest.model_validate(payload)
    except SchemaError as exc:
        raise ValidationError(str(exc), error_code="InvalidRequest") from exc

    # Legacy clients send MIME-style line-wrapped base64.
    encoded = "".join((body.content or "").split())
    if not encoded:
        raise ValidationError("Content (base64) is required.", error_code="MissingContent", field="content")
    try:
        content = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.error("Invalid base64 Content: {}", exc)
        raise ValidationError("Content field is not valid base64.", error_code="InvalidBase64", field="content") from exc

    logger.warning("Legacy JSON upload - base64 content used. Prefer direct file upload via form-data for better performance.")
    logger.info("JSON upload - ProjectId: {}, FileName: {}, Size: {} bytes", body.project_id, body.file_name, len(content))
    return _validated(body.project_id, _base_name(body.file_name), content, body.category_id, body.notes)


def build_from_form(
    file_name: Optional[str],
    content: Optional[bytes],
    project_id: str = "",
    category_id: str = "",
    notes: str = "",
) -> IngestionRequest:
    """Validate the parts of a multipart upload."""
    if not content:
        raise ValidationError(
            "No file provided. Include a 'file' field in the form data.", error_code="NoFile", field="file"
        )
    logger.info(
        "Form upload - ProjectId: {}, FileName: {}, Category: {}, Size: {} bytes",
        project_id,
        file_name,
        category_id,
        len(content),
    )
    return _validated(project_id, _base_name(file_name or ""), content, category_id, notes)


async def parse_upload(request: Request) -> IngestionRequest:
    """Read the HTTP request in whichever format it was sent."""
    if is_json_request(request.headers.get("content-type")):
        raw = await request.body()
        try:
            payload = json.loads(raw or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ValidationError(f"Request body is not valid JSON: {exc}", error_code="InvalidRequest") from exc
        return build_from_json(payload)

    try:
        form = await request.form()
    except Exception as exc:
        logger.error("Failed to read request data: {}", exc)
        raise ValidationError(str(exc) or "Failed to read form data.", error_code="InvalidRequest") from exc

    upload = form.get("file")
    file_name, content = None, None
    if upload is not None and not isinstance(upload, str):
        file_name = upload.filename
        content = await upload.read()
    return build_from_form(
        file_name=file_name,
        content=content,
        project_id=str(form.get("projectId") or ""),
        category_id=str(form.get("categoryId") or ""),
        notes=str(form.get("notes") or ""),
    )
