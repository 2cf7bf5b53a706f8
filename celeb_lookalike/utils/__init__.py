"""Image loading, upload validation and the reference image cache."""

from . import image_loader
from .reference_cache import ReferenceImageCache, safe_name

__all__ = [
    "image_loader",
    "ReferenceImageCache",
    "safe_name",
]
