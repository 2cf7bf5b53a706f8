"""
API Routes

HTTP endpoints for health, gallery status, lookalike matching and cloud
celebrity recognition.
"""

import datetime
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Query
from fastapi.responses import PlainTextResponse

from ..core.config import settings
from ..core.exceptions import (
    GalleryConfigError,
    GalleryEmptyError,
    InvalidImageError,
    UpstreamUnavailableError,
)
from ..core.logger import get_logger
from ..core.state import AppState
from ..pipelines.gallery import Gallery, build_default_gallery
from ..pipelines.recognition import recognize_from_bytes
from ..pipelines.cloud_ranking import recognize_with_cloud
from ..schemas import (
    HealthResponse,
    GalleryStatusResponse,
    LookalikeResponse,
    CloudRecognitionResponse,
)
from ..utils import image_loader

from .deps import get_state, require_gallery, require_embedder, get_cloud_client, get_top_k

logger = get_logger(__name__)

router = APIRouter()


def _read_upload(image: Optional[UploadFile]) -> bytes:
    """Read and validate an uploaded image; 400 on any validation failure."""
    if image is None:
        raise HTTPException(status_code=400, detail="no_image")

    data = image.file.read()
    upload = settings.upload
    try:
        image_loader.validate_upload(
            data,
            min_bytes=upload.min_bytes,
            max_bytes=upload.max_bytes,
            allowed_formats=upload.allowed_formats,
        )
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return data


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@router.get("/", response_class=PlainTextResponse, tags=["Health"])
async def index():
    return "API is up. POST /api/celebs  |  POST /api/detect-celebs  |  GET /health"


@router.get("/health", response_model=HealthResponse, tags=["Health"])
@router.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
async def health(state: AppState = Depends(get_state)):
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        time=datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z"),
        gallery_size=state.gallery_size,
    )


# =============================================================================
# GALLERY ENDPOINTS
# =============================================================================

@router.get("/api/v1/gallery/status", response_model=GalleryStatusResponse, tags=["Gallery"])
async def gallery_status(state: AppState = Depends(get_state)):
    """Get gallery size and membership."""
    gallery = state.gallery
    return GalleryStatusResponse(
        initialized=gallery is not None,
        size=len(gallery) if gallery is not None else 0,
        configured=len(state.references),
        names=gallery.names if gallery is not None else [],
        scoring_mode=settings.matching.scoring_mode,
    )


@router.post("/api/v1/gallery/reload", response_model=GalleryStatusResponse, tags=["Gallery"])
def reload_gallery(
    state: AppState = Depends(get_state),
    embedder: Any = Depends(require_embedder),
):
    """
    Rebuild the gallery from configuration and swap it in.

    The previous gallery stays in service if the rebuild comes back empty
    or the reference list cannot be read.
    """
    try:
        gallery = build_default_gallery(embedder)
    except GalleryEmptyError as e:
        logger.error(f"Gallery reload failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except (ValueError, OSError) as e:
        logger.error(f"Gallery reload failed: {e}")
        raise GalleryConfigError(details=str(e))

    state.swap_gallery(gallery)
    logger.info(f"Gallery reloaded with {len(gallery)} entries")
    return GalleryStatusResponse(
        initialized=True,
        size=len(gallery),
        configured=len(gallery.references),
        names=gallery.names,
        scoring_mode=settings.matching.scoring_mode,
    )


# =============================================================================
# LOOKALIKE ENDPOINTS
# =============================================================================

@router.post("/api/celebs", response_model=LookalikeResponse, response_model_exclude_none=True, tags=["Lookalike"])
def lookalike_api(
    image: UploadFile = File(None),
    top_k: int = Depends(get_top_k),
    gallery: Gallery = Depends(require_gallery),
    embedder: Any = Depends(require_embedder),
):
    """
    Find the closest celebrity for an uploaded face.

    Always answers with at least one celebrity: when no face is detected a
    random pick with zero confidence is returned (matched=false).
    """
    data = _read_upload(image)

    try:
        result = recognize_from_bytes(data, gallery, embedder, top_k=top_k)
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result.to_response()


# =============================================================================
# CLOUD RECOGNITION ENDPOINTS
# =============================================================================

@router.post("/api/detect-celebs", response_model=CloudRecognitionResponse, tags=["Cloud"])
def detect_celebs_api(
    image: UploadFile = File(None),
    gender: Optional[str] = Query(None, description="Gender filter ('any' disables)"),
    threshold: Optional[float] = Query(None, ge=0.0, le=100.0, description="Minimum confidence (percent)"),
    client: Any = Depends(get_cloud_client),
):
    """
    Recognize celebrities with the cloud provider.

    Returns every candidate that passes the threshold and gender filters,
    sorted by provider confidence.
    """
    data = _read_upload(image)

    try:
        result = recognize_with_cloud(client, data, min_confidence=threshold, gender=gender)
    except UpstreamUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return result.to_response()


__all__ = ["router"]
