"""
Cloud Celebrity Recognition

Thin client around AWS Rekognition ``RecognizeCelebrities``. The API returns
pre-scored candidates (name, match confidence, known gender, info URLs), so
no local descriptors are involved.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import settings
from ..core.exceptions import UpstreamUnavailableError
from ..core.logger import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "rekognition"


@dataclass(frozen=True)
class CelebrityCandidate:
    """One provider-scored candidate."""
    name: str
    confidence: float
    gender: Optional[str] = None
    urls: tuple = ()
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "confidence": self.confidence,
            "gender": self.gender,
            "urls": list(self.urls),
            "id": self.id,
        }


def candidate_from_face(face: Dict[str, Any]) -> CelebrityCandidate:
    """Convert one ``CelebrityFaces`` item of a Rekognition response."""
    known_gender = face.get("KnownGender") or {}
    return CelebrityCandidate(
        name=face.get("Name") or "Unknown",
        confidence=float(face.get("MatchConfidence") or 0.0),
        gender=known_gender.get("Type"),
        urls=tuple(face.get("Urls") or ()),
        id=face.get("Id"),
    )


@dataclass
class RekognitionCelebrityClient:
    """Calls Rekognition and returns unranked candidates."""
    region_name: str = field(default_factory=lambda: settings.cloud.aws_region)
    client: Optional[Any] = None

    def __post_init__(self):
        if self.client is None:
            self.client = boto3.client(SERVICE_NAME, region_name=self.region_name)

    def recognize(self, image_bytes: bytes) -> List[CelebrityCandidate]:
        """
        Recognize celebrities in an image.

        Raises:
            UpstreamUnavailableError: on any AWS client or transport failure
        """
        try:
            response = self.client.recognize_celebrities(Image={"Bytes": image_bytes})
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Rekognition call failed: {e}")
            raise UpstreamUnavailableError(SERVICE_NAME, details=str(e))

        faces = response.get("CelebrityFaces") or []
        logger.debug(f"Rekognition returned {len(faces)} celebrity faces")
        return [candidate_from_face(face) for face in faces]


__all__ = [
    "CelebrityCandidate",
    "candidate_from_face",
    "RekognitionCelebrityClient",
]
