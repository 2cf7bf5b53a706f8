"""
Recognition Pipeline

Query image -> descriptor -> ranked gallery matches.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..core.exceptions import InvalidImageError
from ..core.logger import get_logger
from ..ml.inference import EmbeddingProvider
from ..utils import image_loader
from .gallery import Gallery
from .matching import MatchResult, rank_matches

logger = get_logger(__name__)


@dataclass
class RecognitionResult:
    """Result of one lookalike request."""
    matches: List[MatchResult] = field(default_factory=list)
    face_detected: bool = False

    def to_response(self) -> Dict[str, Any]:
        return {
            "celebrities": [m.to_dict() for m in self.matches],
            "faceDetected": self.face_detected,
        }


def recognize_from_bytes(
    image_bytes: bytes,
    gallery: Gallery,
    embedder: EmbeddingProvider,
    top_k: int = 1,
    rng: Optional[random.Random] = None,
) -> RecognitionResult:
    """
    Decode an uploaded image, embed it and rank it against the gallery.

    A query without a detectable face still yields a (fallback) result.

    Raises:
        InvalidImageError: if the bytes cannot be decoded as an image
    """
    try:
        image = image_loader.load_from_bytes(image_bytes)
    except ValueError as e:
        raise InvalidImageError("Could not decode image", details=str(e))

    query = embedder.embed(image)
    if query is None:
        logger.info("No face detected in query image; returning fallback pick")

    matches = rank_matches(query, gallery, top_k=top_k, rng=rng)
    return RecognitionResult(matches=matches, face_detected=query is not None)


__all__ = [
    "RecognitionResult",
    "recognize_from_bytes",
]
