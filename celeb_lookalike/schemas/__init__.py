"""
Pydantic Schemas for the Celebrity Lookalike API

Contains response models for all API endpoints.
"""

from .matching import (
    CelebrityMatch,
    LookalikeResponse,
)
from .cloud import (
    CloudCandidate,
    CloudRecognitionResponse,
)
from .common import (
    HealthResponse,
    GalleryStatusResponse,
    ErrorResponse,
)

__all__ = [
    # Matching
    "CelebrityMatch",
    "LookalikeResponse",
    # Cloud
    "CloudCandidate",
    "CloudRecognitionResponse",
    # Common
    "HealthResponse",
    "GalleryStatusResponse",
    "ErrorResponse",
]
