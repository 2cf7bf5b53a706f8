"""
Cloud Recognition Schemas

Response models for the cloud (provider-scored) celebrity endpoint.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class CloudCandidate(BaseModel):
    """Single provider-scored candidate."""

    name: str = Field(description="Celebrity name")
    confidence: float = Field(description="Provider match confidence (0 to 100)")
    gender: Optional[str] = Field(default=None, description="Provider-reported gender")
    urls: List[str] = Field(default_factory=list, description="Reference URLs")
    id: Optional[str] = Field(default=None, description="Provider celebrity id")


class CloudRecognitionResponse(BaseModel):
    """Response model for POST /api/detect-celebs."""

    candidates: List[CloudCandidate] = Field(
        default_factory=list,
        description="Filtered candidates, best first"
    )
    usedGender: str = Field(
        default="any",
        description="Gender filter that was applied"
    )
    threshold: float = Field(
        default=0.0,
        description="Minimum confidence that was applied"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "candidates": [
                    {
                        "name": "Jane Doe",
                        "confidence": 97.5,
                        "gender": "Female",
                        "urls": ["www.imdb.com/name/nm0000000"],
                        "id": "abc123"
                    }
                ],
                "usedGender": "female",
                "threshold": 50.0
            }
        }


__all__ = [
    "CloudCandidate",
    "CloudRecognitionResponse",
]
