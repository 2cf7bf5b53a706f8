"""
Configuration

Every setting comes from the environment (or ``.env``), grouped by concern.
Each group is its own ``BaseSettings`` so it reads its own prefix.

Usage:
    from celeb_lookalike.core.config import settings

    settings.matching.scoring_mode      # "cosine"
    settings.upload.max_bytes           # 15728640

Environment:
    API_HOST, API_PORT                  server bind (0.0.0.0:3000)
    CORS_ORIGINS                        comma-separated origins (*)
    MODELS_PATH                         ONNX model directory (models)
    AUTO_DOWNLOAD_MODELS                fetch missing models (true)
    YUNET_SCORE_THRESHOLD               face detection threshold (0.7)
    GALLERY_CACHE_DIR                   reference image cache (ref_cache, "" disables)
    GALLERY_REFERENCES_FILE             JSON [{name, url}] (built-in list)
    GALLERY_FETCH_TIMEOUT               reference download timeout, seconds (15)
    MATCH_SCORING_MODE                  cosine | euclidean (cosine)
    MATCH_EUCLIDEAN_SCALE               confidence = 100 - d * scale (160)
    MATCH_MAX_TOP_K                     ranked matches per request (10)
    UPLOAD_MIN_BYTES, UPLOAD_MAX_BYTES  accepted upload size (5000, 15 MiB)
    AWS_REGION                          Rekognition region (us-east-1)
    CLOUD_DEFAULT_THRESHOLD             minimum cloud confidence (0)
    LOG_LEVEL, LOG_FILE                 logging (INFO, none)
"""

import os
from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SCORING_MODES = ("cosine", "euclidean")


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000
    title: str = "Celebrity Lookalike API"
    description: str = "Match an uploaded face against a small celebrity gallery."
    version: str = "1.0.0"


class CORSSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    cors_origins: str = Field(default="*", description="Comma-separated allowed origins")
    allow_credentials: bool = True
    allow_methods: List[str] = ["*"]
    allow_headers: List[str] = ["*"]

    @property
    def origins(self) -> List[str]:
        if self.cors_origins.strip() in ("", "*"):
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class ModelSettings(BaseSettings):
    """YuNet detector and SFace embedder files and parameters."""

    model_config = SettingsConfigDict(extra="ignore")

    models_path: str = "models"
    auto_download_models: bool = True

    yunet_filename: str = "face_detection_yunet_2023mar.onnx"
    yunet_input_size: Tuple[int, int] = (640, 640)
    yunet_score_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    yunet_nms_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    yunet_top_k: int = 5000

    sface_filename: str = "face_recognition_sface_2021dec.onnx"
    sface_feature_dim: int = 128

    @property
    def yunet_path(self) -> str:
        return os.path.join(self.models_path, self.yunet_filename)

    @property
    def sface_path(self) -> str:
        return os.path.join(self.models_path, self.sface_filename)


class GallerySettings(BaseSettings):
    """Where reference images come from and where they are cached."""

    model_config = SettingsConfigDict(env_prefix="GALLERY_", extra="ignore")

    cache_dir: Optional[str] = Field(
        default="ref_cache",
        description="Reference image cache directory; empty disables caching",
    )
    references_file: Optional[str] = Field(
        default=None,
        description="JSON list of {name, url}; unset uses the built-in list",
    )
    fetch_timeout: float = Field(default=15.0, gt=0.0)
    image_width: int = Field(default=512, gt=0, description="Wikimedia thumbnail width")

    @field_validator("cache_dir", "references_file", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return v or None


class MatchingSettings(BaseSettings):
    """Descriptor scoring convention and limits."""

    model_config = SettingsConfigDict(env_prefix="MATCH_", extra="ignore")

    scoring_mode: str = Field(default="cosine", description="cosine or euclidean")
    euclidean_scale: float = Field(
        default=160.0,
        gt=0.0,
        description="Confidence = 100 - distance * scale (euclidean mode)",
    )
    max_top_k: int = Field(default=10, ge=1)

    @field_validator("scoring_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        mode = str(v or "cosine").strip().lower()
        if mode not in SCORING_MODES:
            raise ValueError(f"scoring_mode must be one of {SCORING_MODES}, got {v!r}")
        return mode


class UploadSettings(BaseSettings):
    """Accepted upload sizes and formats (Pillow format names)."""

    model_config = SettingsConfigDict(env_prefix="UPLOAD_", extra="ignore")

    min_bytes: int = Field(default=5000, ge=0)
    max_bytes: int = Field(default=15 * 1024 * 1024, gt=0)
    allowed_formats: Tuple[str, ...] = ("jpeg", "png")


class CloudSettings(BaseSettings):
    """AWS Rekognition celebrity recognition."""

    model_config = SettingsConfigDict(env_prefix="CLOUD_", extra="ignore", populate_by_name=True)

    aws_region: str = Field(default="us-east-1", alias="AWS_REGION")
    default_threshold: float = Field(default=0.0, ge=0.0, le=100.0)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    log_level: str = "INFO"
    log_file: Optional[str] = None


class Settings(BaseSettings):
    """All configuration groups."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    api: APISettings = Field(default_factory=APISettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    models: ModelSettings = Field(default_factory=ModelSettings)
    gallery: GallerySettings = Field(default_factory=GallerySettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    cloud: CloudSettings = Field(default_factory=CloudSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()


__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "SCORING_MODES",
    "APISettings",
    "CORSSettings",
    "ModelSettings",
    "GallerySettings",
    "MatchingSettings",
    "UploadSettings",
    "CloudSettings",
    "LoggingSettings",
]
