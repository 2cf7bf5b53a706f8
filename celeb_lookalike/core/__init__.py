"""
Core module for the Celebrity Lookalike API.

Contains centralized configuration, logging, exceptions, and application state.
"""

from .config import settings, get_settings, Settings
from .logger import logger, get_logger
from .exceptions import (
    LookalikeError,
    InvalidImageError,
    UnsupportedFormatError,
    ImageTooSmallError,
    ImageTooLargeError,
    ReferenceFetchError,
    GalleryEmptyError,
    GalleryNotInitializedError,
    GalleryConfigError,
    UpstreamUnavailableError,
    ModelNotLoadedError,
    ModelLoadError,
)
from .state import AppState, app_state, get_app_state

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",
    # Logger
    "logger",
    "get_logger",
    # Exceptions
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
    # State
    "AppState",
    "app_state",
    "get_app_state",
]
