"""
FastAPI dependencies shared by the route handlers.
"""

from typing import Any

from fastapi import Depends, HTTPException, Query

from ..core.config import settings
from ..core.exceptions import GalleryNotInitializedError, ModelNotLoadedError
from ..core.state import AppState, get_app_state
from ..ml.celebrity_api import RekognitionCelebrityClient
from ..pipelines.gallery import Gallery


def get_state() -> AppState:
    return get_app_state()


def require_gallery(state: AppState = Depends(get_state)) -> Gallery:
    """Current gallery snapshot; 503 until startup has built one."""
    try:
        return state.require_gallery()
    except GalleryNotInitializedError as e:
        raise HTTPException(status_code=503, detail=str(e))


def require_embedder(state: AppState = Depends(get_state)) -> Any:
    if state.embedder is None:
        raise HTTPException(status_code=503, detail=str(ModelNotLoadedError("SFace")))
    return state.embedder


def get_cloud_client(state: AppState = Depends(get_state)) -> Any:
    """Rekognition client, created on first use."""
    return state.get_cloud_client(RekognitionCelebrityClient)


def get_top_k(top_k: int = Query(1, ge=1, description="Number of ranked matches to return")) -> int:
    """Requested number of matches, capped by MATCH_MAX_TOP_K."""
    return min(top_k, settings.matching.max_top_k)


__all__ = [
    "get_state",
    "require_gallery",
    "require_embedder",
    "get_cloud_client",
    "get_top_k",
]
