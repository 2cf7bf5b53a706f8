"""
Matching Pipeline

Nearest-neighbour matching of a query descriptor against the reference
gallery, with confidence normalization and the no-face / empty-gallery
fallback policy.

Two scoring conventions are supported (one per deployment, see
``MATCH_SCORING_MODE``):

* ``euclidean``: lower distance is better,
  ``confidence = clamp(0, 100, 100 - d * scale)``
* ``cosine``: higher similarity is better,
  ``confidence = clamp(0, 100, sim * 100)``

Vectors of different lengths are compared over their common prefix.
"""

import math
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.config import settings
from ..core.logger import get_logger
from .gallery import Gallery, GalleryEntry

logger = get_logger(__name__)

EUCLIDEAN = "euclidean"
COSINE = "cosine"
SCORING_MODES = (EUCLIDEAN, COSINE)

NOTE_NO_FACE = "No face detected; random fun pick."
NOTE_EMPTY_GALLERY = "Gallery is empty; random fun pick."
UNKNOWN_NAME = "Unknown"

_default_rng = random.Random()


@dataclass(frozen=True)
class MatchResult:
    """Best match (or fallback pick) for one query."""
    name: str
    confidence: float
    display_url: str
    matched: bool
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "name": self.name,
            "confidence": self.confidence,
            "imageUrl": self.display_url,
            "matched": self.matched,
        }
        if self.note:
            out["note"] = self.note
        return out


# =============================================================================
# SCORING
# =============================================================================

def _truncated(query: np.ndarray, ref: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    n = min(query.shape[0], ref.shape[0])
    return query[:n].astype(np.float64), ref[:n].astype(np.float64)


def euclidean_distance(query: Sequence[float], ref: Sequence[float]) -> float:
    """Euclidean distance over the common prefix; inf when there is none."""
    q, e = _truncated(np.asarray(query).reshape(-1), np.asarray(ref).reshape(-1))
    if q.size == 0:
        return math.inf
    distance = float(np.sqrt(np.sum((q - e) ** 2)))
    return distance if not math.isnan(distance) else math.inf


def cosine_similarity(query: Sequence[float], ref: Sequence[float]) -> float:
    """Cosine similarity over the common prefix; 0.0 when either side has zero norm."""
    q, e = _truncated(np.asarray(query).reshape(-1), np.asarray(ref).reshape(-1))
    denom = float(np.linalg.norm(q)) * float(np.linalg.norm(e))
    if q.size == 0 or denom == 0.0 or not math.isfinite(denom):
        return 0.0
    similarity = float(np.dot(q, e) / denom)
    return similarity if math.isfinite(similarity) else 0.0


def clamp_confidence(value: float) -> float:
    """Clamp to [0, 100] and round to 2 decimals. NaN maps to 0."""
    if value is None or math.isnan(value):
        return 0.0
    return round(max(0.0, min(100.0, float(value))), 2)


def distance_to_confidence(distance: float, scale: float) -> float:
    if math.isinf(distance):
        return 0.0
    return clamp_confidence(100.0 - distance * scale)


def similarity_to_confidence(similarity: float) -> float:
    return clamp_confidence(similarity * 100.0)


def _resolve_mode(mode: Optional[str]) -> str:
    mode = (mode or settings.matching.scoring_mode).lower()
    if mode not in SCORING_MODES:
        raise ValueError(f"Unknown scoring mode: {mode}")
    return mode


def score_gallery(
    query: Sequence[float],
    gallery: Gallery,
    mode: Optional[str] = None,
    scale: Optional[float] = None,
) -> List[Tuple[GalleryEntry, float, float]]:
    """
    Score the query against every entry, in gallery order.

    Returns:
        List of (entry, raw_score, confidence). raw_score is a distance in
        euclidean mode and a similarity in cosine mode.
    """
    mode = _resolve_mode(mode)
    scale = settings.matching.euclidean_scale if scale is None else scale
    q = np.asarray(query, dtype=np.float32).reshape(-1)

    scored = []
    for entry in gallery.entries:
        if mode == EUCLIDEAN:
            raw = euclidean_distance(q, entry.embedding)
            confidence = distance_to_confidence(raw, scale)
        else:
            raw = cosine_similarity(q, entry.embedding)
            confidence = similarity_to_confidence(raw)
        scored.append((entry, raw, confidence))
    return scored


def _sort_key(mode: str):
    if mode == EUCLIDEAN:
        return lambda item: item[1]
    return lambda item: -item[1]


# =============================================================================
# FALLBACK
# =============================================================================

def fallback_pick(
    gallery: Gallery,
    note: str,
    rng: Optional[random.Random] = None,
) -> MatchResult:
    """
    Random pick with zero confidence.

    Chooses uniformly among gallery entries, or among the configured
    references when the gallery has none. Without either, a neutral result.
    """
    rng = rng or _default_rng
    if gallery.entries:
        pick = rng.choice(gallery.entries)
        return MatchResult(pick.name, 0.0, pick.display_url, matched=False, note=note)
    if gallery.references:
        ref = rng.choice(gallery.references)
        return MatchResult(ref.name, 0.0, ref.source_url, matched=False, note=note)
    return MatchResult(UNKNOWN_NAME, 0.0, "", matched=False, note=note)


# =============================================================================
# MATCHING
# =============================================================================

def match(
    query: Optional[Sequence[float]],
    gallery: Gallery,
    mode: Optional[str] = None,
    scale: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> MatchResult:
    """
    Select the single best gallery entry for a query descriptor.

    Args:
        query: Query descriptor, or None when no face was detected
        gallery: Built reference gallery (never mutated)
        mode: 'cosine' or 'euclidean' (default from settings)
        scale: Euclidean distance-to-confidence scale (default from settings)
        rng: Randomness source for fallback picks

    Returns:
        MatchResult; matched=False for the no-face and empty-gallery fallbacks
    """
    results = rank_matches(query, gallery, top_k=1, mode=mode, scale=scale, rng=rng)
    return results[0]


def rank_matches(
    query: Optional[Sequence[float]],
    gallery: Gallery,
    top_k: int = 1,
    mode: Optional[str] = None,
    scale: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> List[MatchResult]:
    """
    Return the top_k gallery entries, best first.

    Ties keep gallery order. The no-face and empty-gallery cases return a
    single fallback result.
    """
    if query is None:
        return [fallback_pick(gallery, NOTE_NO_FACE, rng)]
    if not gallery.entries:
        logger.warning("Matching against an empty gallery")
        return [fallback_pick(gallery, NOTE_EMPTY_GALLERY, rng)]

    mode = _resolve_mode(mode)
    scored = score_gallery(query, gallery, mode=mode, scale=scale)
    # sorted() is stable: equal scores stay in gallery order
    ranked = sorted(scored, key=_sort_key(mode))

    top_k = max(1, int(top_k))
    return [
        MatchResult(entry.name, confidence, entry.display_url, matched=True)
        for entry, _, confidence in ranked[:top_k]
    ]


__all__ = [
    "EUCLIDEAN",
    "COSINE",
    "SCORING_MODES",
    "MatchResult",
    "euclidean_distance",
    "cosine_similarity",
    "clamp_confidence",
    "distance_to_confidence",
    "similarity_to_confidence",
    "score_gallery",
    "fallback_pick",
    "match",
    "rank_matches",
]
