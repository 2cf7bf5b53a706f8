"""
Application State Management

Provides a singleton AppState class holding the embedding provider, the
built reference gallery and the cloud recognition client.

The gallery is set once at startup and only ever replaced as a whole
(``swap_gallery``). Request handlers read ``app_state.gallery`` once and keep
that object for the rest of the request.

Usage:
    from celeb_lookalike.core.state import app_state

    # During startup
    app_state.embedder = inference.get_embedding_provider()
    app_state.swap_gallery(build_gallery(references, app_state.embedder))

    # In routes/services
    gallery = app_state.require_gallery()
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Any, Optional
import threading

from .exceptions import GalleryNotInitializedError


@dataclass
class AppState:
    """
    Singleton class to hold application-wide state.

    Attributes:
        embedder: Embedding provider used for queries and references
        gallery: Built reference gallery (immutable, swapped atomically)
        references: Configured reference list the gallery was built from
        cloud_client: Cloud celebrity recognition client (lazy)
        initialized: Whether startup initialization is complete
    """

    embedder: Optional[Any] = None
    gallery: Optional[Any] = None
    references: tuple = ()
    cloud_client: Optional[Any] = None
    initialized: bool = False

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def swap_gallery(self, gallery: Any) -> Any:
        """Replace the whole gallery reference; returns the previous one."""
        with self._lock:
            previous = self.gallery
            self.gallery = gallery
            self.references = tuple(getattr(gallery, "references", ()))
            self.initialized = True
            return previous

    def get_cloud_client(self, factory: Callable[[], Any]) -> Any:
        """Return the cloud client, creating it with ``factory`` exactly once."""
        with self._lock:
            if self.cloud_client is None:
                self.cloud_client = factory()
            return self.cloud_client

    def require_gallery(self) -> Any:
        """Return the current gallery or raise if startup has not finished."""
        gallery = self.gallery
        if gallery is None:
            raise GalleryNotInitializedError()
        return gallery

    def reset(self) -> None:
        """Reset all state to initial values."""
        with self._lock:
            self.embedder = None
            self.gallery = None
            self.references = ()
            self.cloud_client = None
            self.initialized = False

    @property
    def gallery_size(self) -> int:
        gallery = self.gallery
        return len(gallery) if gallery is not None else 0

    def get_status(self) -> Dict[str, Any]:
        """Get current state status for health checks."""
        return {
            "initialized": self.initialized,
            "embedder_loaded": self.embedder is not None,
            "gallery_size": self.gallery_size,
            "configured_references": len(self.references),
            "cloud_client": self.cloud_client is not None,
        }


# Singleton instance
app_state = AppState()


def get_app_state() -> AppState:
    """
    Get the application state singleton.

    Used as a FastAPI dependency:
        @router.get("/status")
        def status(state: AppState = Depends(get_app_state)):
            return state.get_status()
    """
    return app_state


__all__ = [
    "AppState",
    "app_state",
    "get_app_state",
]
