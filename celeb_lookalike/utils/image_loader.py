"""
Image Loader Module

Centralized image loading and validation for the lookalike API.
Provides a unified interface for loading images from:
- Raw bytes (uploads, cached reference files)
- URLs (HTTP/HTTPS, via requests), fetched as raw bytes
"""

import io
from typing import Optional, Tuple, Iterable

import cv2
import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import (
    InvalidImageError,
    UnsupportedFormatError,
    ImageTooSmallError,
    ImageTooLargeError,
)

# Wikimedia rejects requests without a descriptive User-Agent
REQUEST_HEADERS = {
    "User-Agent": "celeb-lookalike/1.0 (reference gallery builder)"
}
DEFAULT_TIMEOUT = 15.0


def _pil_to_cv2(img: Image.Image) -> np.ndarray:
    """Convert PIL Image to OpenCV BGR numpy array."""
    if img.mode != "RGB":
        img = img.convert("RGB")
    return cv2.cvtColor(np.array(img), cv2.COLOR_RGB2BGR)


# Core Loading Functions

def load_from_bytes(data: bytes) -> np.ndarray:
    """Decode image bytes into an OpenCV BGR array."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        return _pil_to_cv2(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ValueError(f"Invalid image data: {e}")


def fetch_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """
    Download raw bytes from an HTTP/HTTPS URL, following redirects.

    Raises:
        requests.RequestException: on transport errors or non-2xx status
    """
    response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout, allow_redirects=True)
    response.raise_for_status()
    return response.content


# Validation Functions

def detect_format(data: bytes) -> Optional[str]:
    """Return the lowercase Pillow format name of image bytes, or None."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return (img.format or "").lower() or None
    except (UnidentifiedImageError, OSError, ValueError):
        return None


def validate_upload(
    data: Optional[bytes],
    min_bytes: int,
    max_bytes: int,
    allowed_formats: Iterable[str] = ("jpeg", "png"),
) -> Tuple[str, int]:
    """
    Validate uploaded image bytes before any embedding is attempted.

    Args:
        data: Raw upload bytes
        min_bytes: Minimum accepted size
        max_bytes: Maximum accepted size
        allowed_formats: Accepted Pillow format names

    Returns:
        Tuple of (format, size_in_bytes)

    Raises:
        InvalidImageError: empty upload
        ImageTooSmallError / ImageTooLargeError: size out of bounds
        UnsupportedFormatError: not one of the allowed formats
    """
    if not data:
        raise InvalidImageError("Image required")

    size = len(data)
    if size < min_bytes:
        raise ImageTooSmallError(size, min_bytes)
    if size > max_bytes:
        raise ImageTooLargeError(size, max_bytes)

    allowed = tuple(fmt.lower() for fmt in allowed_formats)
    fmt = detect_format(data)
    if fmt not in allowed:
        raise UnsupportedFormatError(fmt, supported_formats=allowed)

    return fmt, size


__all__ = [
    "REQUEST_HEADERS",
    "load_from_bytes",
    "fetch_bytes",
    "detect_format",
    "validate_upload",
]
