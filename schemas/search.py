"""Search request/response models."""
from pydantic import BaseModel, ConfigDict, Field


class SearchBody(BaseModel):
    query: str | None = None


class SearchResultItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: float
    path: str | None = None
    file_name: str | None = Field(None, alias="fileName")
    project_id: str | None = Field(None, alias="projectId")
    category_id: str | None = Field(None, alias="categoryId")
    notes: str | None = None
    highlights: list[str] | None = None


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    total_count: int = Field(alias="totalCount")
    count: int
    results: list[SearchResultItem]
