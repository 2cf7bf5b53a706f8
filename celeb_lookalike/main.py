"""
Celebrity Lookalike API entry point.

    celeb-lookalike                      # serve on API_HOST:API_PORT
    celeb-lookalike --port 3001 --reload
    uvicorn celeb_lookalike.main:app
"""

import sys
import argparse
from pathlib import Path
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# .env must be loaded before settings are created
for _env_path in (Path.cwd() / ".env", Path(__file__).parent / ".env"):
    if _env_path.exists():
        load_dotenv(_env_path)
        break

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.exceptions import (
    LookalikeError,
    InvalidImageError,
    GalleryNotInitializedError,
    GalleryEmptyError,
    GalleryConfigError,
    UpstreamUnavailableError,
)
from .core.logger import get_logger, configure_logging
from .core.state import app_state
from .api import api_router
from .schemas import ErrorResponse
from .ml import inference
from .pipelines.gallery import build_default_gallery

logger = get_logger("main")


# =============================================================================
# STARTUP / SHUTDOWN
# =============================================================================

def initialize_all() -> None:
    """
    Load the embedder, then build the gallery and publish it.

    Raises:
        ModelLoadError: models missing and not downloadable
        GalleryEmptyError: no reference produced a descriptor
    """
    app_state.embedder = inference.get_embedding_provider()
    gallery = build_default_gallery(app_state.embedder)
    app_state.swap_gallery(gallery)
    logger.info(f"Serving {len(gallery)} celebrities ({settings.matching.scoring_mode} scoring)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build everything before the first request; an empty gallery aborts startup."""
    try:
        initialize_all()
    except Exception as e:
        logger.error(f"Startup aborted: {e}")
        raise

    yield

    app_state.reset()
    logger.info("Lookalike API stopped")


# =============================================================================
# APPLICATION
# =============================================================================

_ERROR_STATUS = (
    (InvalidImageError, 400, "invalid_image"),
    (UpstreamUnavailableError, 502, "upstream_unavailable"),
    (GalleryNotInitializedError, 503, "gallery_not_initialized"),
    (GalleryEmptyError, 503, "gallery_empty"),
    (GalleryConfigError, 500, "gallery_config_error"),
)


def _error_response(exc: LookalikeError) -> JSONResponse:
    for exc_type, status_code, code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, code = 500, "server_error"
    body = ErrorResponse(error=code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(with_lifespan: bool = True) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        with_lifespan: load models and build the gallery on startup
            (tests pass False and install their own state)
    """
    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description=settings.api.description,
        lifespan=lifespan if with_lifespan else None,
    )

    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.include_router(api_router)

    @app.exception_handler(LookalikeError)
    async def handle_lookalike_error(request: Request, exc: LookalikeError):
        return _error_response(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        body = ErrorResponse(error="server_error", message=str(exc) or type(exc).__name__)
        return JSONResponse(status_code=500, content=body.model_dump())

    return app


app = create_app()


# =============================================================================
# CLI
# =============================================================================

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def parse_args(argv=None) -> argparse.Namespace:
    api = settings.api
    default_level = settings.logging.log_level.lower()

    parser = argparse.ArgumentParser(description="Celebrity Lookalike API server")
    parser.add_argument("--host", default=api.host, help=f"bind address (default: {api.host})")
    parser.add_argument("--port", type=int, default=api.port, help=f"bind port (default: {api.port})")
    parser.add_argument("--workers", type=int, default=1, help="uvicorn worker processes")
    parser.add_argument("--reload", action="store_true", help="restart on code changes (single worker)")
    parser.add_argument("--log-level", default=default_level, choices=LOG_LEVELS,
                        help=f"default: {default_level}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the server; returns a process exit code."""
    args = parse_args(argv)
    configure_logging(args.log_level)

    workers = 1 if args.reload else args.workers
    if workers != args.workers:
        logger.warning("--reload runs a single worker")

    logger.info(f"Lookalike API on http://{args.host}:{args.port} (docs at /docs, workers={workers})")
    try:
        uvicorn.run(
            "celeb_lookalike.main:app",
            host=args.host,
            port=args.port,
            workers=workers,
            reload=args.reload,
            log_level=args.log_level,
        )
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logger.error(f"Server failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
