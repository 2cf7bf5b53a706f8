"""
Common Schemas

Shared response models for health, gallery status and errors.
"""

from typing import Optional, Any, List
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for /health and /api/v1/health endpoints."""

    status: str = Field(
        default="ok",
        description="Service health status"
    )
    time: str = Field(
        description="Current server time (ISO 8601 format)"
    )
    gallery_size: int = Field(
        default=0,
        description="Number of embedded gallery entries"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "status": "ok",
                "time": "2024-01-15T10:30:00Z",
                "gallery_size": 10
            }
        }


class GalleryStatusResponse(BaseModel):
    """Response model for /api/v1/gallery/status."""

    initialized: bool = Field(
        description="Whether the gallery has been built"
    )
    size: int = Field(
        description="Number of embedded gallery entries"
    )
    configured: int = Field(
        description="Number of configured references"
    )
    names: List[str] = Field(
        default_factory=list,
        description="Names of embedded gallery entries, in gallery order"
    )
    scoring_mode: str = Field(
        description="Scoring convention in use ('cosine' or 'euclidean')"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "initialized": True,
                "size": 9,
                "configured": 10,
                "names": ["Tom Cruise", "Angelina Jolie"],
                "scoring_mode": "cosine"
            }
        }


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: str = Field(
        description="Machine-readable error code"
    )
    message: Optional[str] = Field(
        default=None,
        description="Human-readable error message"
    )
    details: Optional[Any] = Field(
        default=None,
        description="Additional error details"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "error": "invalid_image",
                "message": "Image is too small",
                "details": "Size: 1200 bytes, Min: 5000 bytes"
            }
        }


__all__ = [
    "HealthResponse",
    "GalleryStatusResponse",
    "ErrorResponse",
]
