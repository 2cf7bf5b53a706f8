"""
Pipelines Module

Business logic for gallery building, descriptor matching, lookalike
recognition and cloud candidate ranking. Separates core logic from API
route handling.
"""

from .gallery import (
    Reference,
    GalleryEntry,
    Gallery,
    load_references,
    default_references,
    build_gallery,
    build_default_gallery,
)
from .matching import MatchResult, match, rank_matches, score_gallery
from .recognition import RecognitionResult, recognize_from_bytes
from .cloud_ranking import (
    CloudRecognitionResult,
    rank_candidates,
    recognize_with_cloud,
)

__all__ = [
    # Gallery
    "Reference",
    "GalleryEntry",
    "Gallery",
    "load_references",
    "default_references",
    "build_gallery",
    "build_default_gallery",
    # Matching
    "MatchResult",
    "match",
    "rank_matches",
    "score_gallery",
    # Recognition
    "RecognitionResult",
    "recognize_from_bytes",
    # Cloud
    "CloudRecognitionResult",
    "rank_candidates",
    "recognize_with_cloud",
]
