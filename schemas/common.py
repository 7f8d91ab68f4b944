"""Common Pydantic models."""
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope returned for every failed request."""
    error: str
    message: str


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: str
