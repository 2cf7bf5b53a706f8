"""
Custom Exceptions for the Celebrity Lookalike API

Provides domain-specific exceptions for better error handling and debugging.

Usage:
    from celeb_lookalike.core.exceptions import GalleryEmptyError

    if not entries:
        raise GalleryEmptyError(details={"configured": len(references)})
"""

from typing import Optional, Any


class LookalikeError(Exception):
    """
    Base exception for all lookalike service errors.

    All custom exceptions inherit from this class, allowing
    catch-all handling when needed.
    """

    def __init__(
        self,
        message: str = "Lookalike service error occurred",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class InvalidImageError(LookalikeError):
    """Raised when an uploaded image is invalid, corrupted, or unsupported."""

    def __init__(
        self,
        message: str = "Invalid or unsupported image",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class UnsupportedFormatError(InvalidImageError):
    """Raised when image format is not supported."""

    def __init__(
        self,
        format: Optional[str],
        supported_formats: tuple = ("jpeg", "png"),
        message: str = "Unsupported image format",
    ):
        self.format = format
        self.supported_formats = supported_formats
        details = f"Format: {format or 'unknown'}, Supported: {', '.join(supported_formats)}"
        super().__init__(message, details)


class ImageTooSmallError(InvalidImageError):
    """Raised when an upload is below the minimum byte size."""

    def __init__(
        self,
        size: int,
        min_size: int,
        message: str = "Image is too small",
    ):
        self.size = size
        self.min_size = min_size
        super().__init__(message, f"Size: {size} bytes, Min: {min_size} bytes")


class ImageTooLargeError(InvalidImageError):
    """Raised when an upload exceeds the maximum byte size."""

    def __init__(
        self,
        size: int,
        max_size: int,
        message: str = "Image is too large",
    ):
        self.size = size
        self.max_size = max_size
        super().__init__(message, f"Size: {size} bytes, Max: {max_size} bytes")


class ReferenceFetchError(LookalikeError):
    """Raised when a reference image cannot be downloaded."""

    def __init__(
        self,
        name: str,
        url: str,
        message: str = "Failed to fetch reference image",
        details: Optional[Any] = None,
    ):
        self.name = name
        self.url = url
        super().__init__(f"{message}: {name} from {url}", details)


class GalleryEmptyError(LookalikeError):
    """Raised when no reference produced an embedding; startup must abort."""

    def __init__(
        self,
        message: str = "Gallery is empty (no reference descriptors)",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class GalleryNotInitializedError(LookalikeError):
    """Raised when a request arrives before the gallery has been built."""

    def __init__(
        self,
        message: str = "Gallery not initialized",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class GalleryConfigError(LookalikeError):
    """Raised when the configured reference list cannot be read or parsed."""

    def __init__(
        self,
        message: str = "Invalid gallery reference configuration",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class UpstreamUnavailableError(LookalikeError):
    """Raised when the cloud recognition API or a remote fetch fails."""

    def __init__(
        self,
        service: str,
        message: str = "Upstream service unavailable",
        details: Optional[Any] = None,
    ):
        self.service = service
        super().__init__(f"{message}: {service}", details)


class ModelNotLoadedError(LookalikeError):
    """Raised when the embedding model is not loaded."""

    def __init__(
        self,
        model_name: str,
        message: str = "Model not loaded",
        details: Optional[Any] = None,
    ):
        self.model_name = model_name
        super().__init__(f"{message}: {model_name}", details)


class ModelLoadError(LookalikeError):
    """Raised when an ONNX model fails to load."""

    def __init__(
        self,
        model_name: str,
        model_path: str,
        message: str = "Failed to load model",
        details: Optional[Any] = None,
    ):
        self.model_name = model_name
        self.model_path = model_path
        super().__init__(f"{message}: {model_name} from {model_path}", details)


__all__ = [
    "LookalikeError",
    "InvalidImageError",
    "UnsupportedFormatError",
    "ImageTooSmallError",
    "ImageTooLargeError",
    "ReferenceFetchError",
    "GalleryEmptyError",
    "GalleryNotInitializedError",
    "GalleryConfigError",
    "UpstreamUnavailableError",
    "ModelNotLoadedError",
    "ModelLoadError",
]
