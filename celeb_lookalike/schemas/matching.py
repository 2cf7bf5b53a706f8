"""
Matching Schemas

Response models for the descriptor-based lookalike endpoint.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class CelebrityMatch(BaseModel):
    """Single lookalike result."""

    name: str = Field(
        description="Celebrity name"
    )
    confidence: float = Field(
        ge=0.0,
        le=100.0,
        description="Confidence score (0 to 100, not a probability)"
    )
    imageUrl: str = Field(
        description="Reference photo URL"
    )
    matched: bool = Field(
        description="False for the random fallback pick (no face / empty gallery)"
    )
    note: Optional[str] = Field(
        default=None,
        description="Why a fallback pick was returned"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Keanu Reeves",
                "confidence": 63.41,
                "imageUrl": "https://commons.wikimedia.org/wiki/Special:FilePath/Keanu_Reeves_2019.jpg?width=512",
                "matched": True
            }
        }


class LookalikeResponse(BaseModel):
    """Response model for POST /api/celebs."""

    celebrities: List[CelebrityMatch] = Field(
        default_factory=list,
        description="Matches, best first"
    )
    faceDetected: bool = Field(
        default=False,
        description="False when the matches are a fallback pick for a query without a face"
    )


__all__ = [
    "CelebrityMatch",
    "LookalikeResponse",
]
