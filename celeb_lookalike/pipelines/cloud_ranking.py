"""
Cloud Ranking Pipeline

Filtering and ranking of provider-scored celebrity candidates (cloud
recognition variant). No descriptors are involved: candidates arrive with a
confidence already attached.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..core.config import settings
from ..core.logger import get_logger
from ..ml.celebrity_api import CelebrityCandidate

logger = get_logger(__name__)

ANY_GENDER = "any"


@dataclass
class CloudRecognitionResult:
    """Ranked candidates plus the filters that produced them."""
    candidates: List[CelebrityCandidate] = field(default_factory=list)
    used_gender: str = ANY_GENDER
    threshold: float = 0.0

    def to_response(self) -> Dict[str, Any]:
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "usedGender": self.used_gender,
            "threshold": self.threshold,
        }


def normalize_gender(gender: Optional[str]) -> Optional[str]:
    """Lowercased gender filter, or None when no filtering is requested."""
    if gender is None:
        return None
    value = gender.strip().lower()
    if not value or value == ANY_GENDER:
        return None
    return value


def rank_candidates(
    candidates: Iterable[CelebrityCandidate],
    min_confidence: Optional[float] = None,
    gender: Optional[str] = None,
) -> List[CelebrityCandidate]:
    """
    Sort candidates by confidence (descending) and apply the filters.

    Args:
        candidates: Provider-scored candidates, in provider order
        min_confidence: Keep candidates with confidence >= this value
        gender: Keep candidates whose gender equals this, case-insensitively
                (None, "" or "any" disables the filter)

    Returns:
        Filtered list, best first; equal confidences keep provider order
    """
    wanted_gender = normalize_gender(gender)

    kept = []
    for candidate in candidates:
        if min_confidence is not None and candidate.confidence < min_confidence:
            continue
        if wanted_gender is not None and (candidate.gender or "").lower() != wanted_gender:
            continue
        kept.append(candidate)

    return sorted(kept, key=lambda c: c.confidence, reverse=True)


def recognize_with_cloud(
    client: Any,
    image_bytes: bytes,
    min_confidence: Optional[float] = None,
    gender: Optional[str] = None,
) -> CloudRecognitionResult:
    """
    Ask the cloud client for candidates and rank them.

    Raises:
        UpstreamUnavailableError: propagated from the client
    """
    threshold = settings.cloud.default_threshold if min_confidence is None else float(min_confidence)
    raw = client.recognize(image_bytes)
    ranked = rank_candidates(raw, min_confidence=threshold, gender=gender)
    logger.debug(f"Cloud candidates: {len(raw)} returned, {len(ranked)} kept")
    return CloudRecognitionResult(
        candidates=ranked,
        used_gender=normalize_gender(gender) or ANY_GENDER,
        threshold=threshold,
    )


__all__ = [
    "ANY_GENDER",
    "CloudRecognitionResult",
    "normalize_gender",
    "rank_candidates",
    "recognize_with_cloud",
]
