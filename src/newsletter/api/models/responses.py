"""Response models for the API."""

from typing import Optional
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class ProcessResponse(BaseModel):
    """Response from the process endpoint."""
    success: bool = True
    html: str
    filename: str


class ErrorResponse(BaseModel):
    """Error response model."""
    success: bool = False
    error: str
    message: Optional[str] = None
