"""Upload and document-operation request/response models."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class JsonUploadRequest(BaseModel):
    """Legacy JSON upload body with base64 content.

    Older API clients send PascalCase keys (``ProjectId``, ``FileName`` ...),
    so both spellings are accepted.
    """
    project_id: str = Field("", validation_alias=AliasChoices("projectId", "ProjectId"))
    file_name: str = Field("", validation_alias=AliasChoices("fileName", "FileName"))
    content: str | None = Field(None, validation_alias=AliasChoices("content", "Content"))
    category_id: str = Field("", validation_alias=AliasChoices("categoryId", "CategoryId"))
    notes: str = Field("", validation_alias=AliasChoices("notes", "Notes"))


class DocumentOperationsRequest(BaseModel):
    """Request to (re)run extraction and indexing for an already stored object."""
    file_path: str = Field("", validation_alias=AliasChoices("filePath", "fullpathofthefile"))
    notes: str | None = None


class DocumentOperationsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    file_name: str = Field(alias="fileName")
    extracted_characters: int = Field(alias="extractedCharacters")
    indexed: bool


class IndexSetupResponse(BaseModel):
    message: str
    index: str
    container: str
