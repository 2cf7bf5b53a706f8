"""
Model Download Script

Fetches the YuNet (detection) and SFace (embedding) ONNX files from the
OpenCV model zoo into MODELS_PATH.

Usage:
    celeb-lookalike-download-models
    celeb-lookalike-download-models --models-dir ./models --force
"""

import os
import sys
import argparse
import hashlib
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from ..core.config import settings
from ..core.logger import get_logger

logger = get_logger(__name__)

ZOO_URL = "https://github.com/opencv/opencv_zoo/raw/refs/heads/main/models"
MIN_MODEL_SIZE_BYTES = 100_000
CHUNK_SIZE = 1 << 16
DOWNLOAD_TIMEOUT = 60.0


@dataclass(frozen=True)
class ModelFile:
    """One downloadable ONNX model."""
    key: str
    url: str
    filename: str
    sha256: Optional[str] = None

    def path_in(self, models_dir: str) -> str:
        return os.path.join(models_dir, self.filename)


def model_files() -> Dict[str, ModelFile]:
    """Model registry, with filenames taken from settings."""
    cfg = settings.models
    return {
        "yunet": ModelFile(
            key="yunet",
            url=f"{ZOO_URL}/face_detection_yunet/face_detection_yunet_2023mar.onnx",
            filename=cfg.yunet_filename,
        ),
        "sface": ModelFile(
            key="sface",
            url=f"{ZOO_URL}/face_recognition_sface/face_recognition_sface_2021dec.onnx",
            filename=cfg.sface_filename,
        ),
    }


def _sha256(path: str) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


def is_valid_model_file(path: str, sha256: Optional[str] = None) -> bool:
    """Present, plausibly sized, and matching the hash when one is known."""
    if not os.path.isfile(path) or os.path.getsize(path) < MIN_MODEL_SIZE_BYTES:
        return False
    return sha256 is None or _sha256(path) == sha256


def fetch_model(model: ModelFile, dest: str, timeout: float = DOWNLOAD_TIMEOUT) -> None:
    """
    Stream a model to ``dest`` through a ``.part`` file.

    Raises:
        requests.RequestException: on transport errors or non-2xx status
    """
    tmp_path = dest + ".part"
    logger.info(f"Downloading {model.key} from {model.url}...")
    try:
        with requests.get(model.url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(tmp_path, "wb") as out:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    out.write(chunk)
        os.replace(tmp_path, dest)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
    logger.info(f"Saved {model.key} to {dest} ({os.path.getsize(dest) / 1e6:.1f} MB)")


def download_model(model_key: str, models_dir: Optional[str] = None, force: bool = False) -> bool:
    """
    Make sure one model is present in ``models_dir``.

    Returns:
        True when the model is available afterwards
    """
    models = model_files()
    if model_key not in models:
        logger.error(f"Unknown model: {model_key}")
        return False

    model = models[model_key]
    models_dir = models_dir or settings.models.models_path
    dest = model.path_in(models_dir)

    if not force and is_valid_model_file(dest, model.sha256):
        logger.debug(f"{model_key} already present at {dest}")
        return True

    try:
        fetch_model(model, dest)
    except (requests.RequestException, OSError) as e:
        logger.error(f"Error downloading {model_key}: {e}")
        return False

    if not is_valid_model_file(dest, model.sha256):
        logger.error(f"Downloaded {model_key} failed verification")
        return False
    return True


def download_all(models_dir: Optional[str] = None, force: bool = False) -> bool:
    """Download every registered model; True when all are available."""
    models_dir = models_dir or settings.models.models_path
    os.makedirs(models_dir, exist_ok=True)
    results = [download_model(key, models_dir, force=force) for key in model_files()]
    return all(results)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Download face detection/embedding models")
    parser.add_argument("--models-dir", default=settings.models.models_path,
                        help=f"Target directory (default: {settings.models.models_path})")
    parser.add_argument("--force", action="store_true", help="Download even if present")
    args = parser.parse_args(argv)

    if download_all(args.models_dir, force=args.force):
        logger.info("All models ready")
        return 0
    logger.error("Some models could not be downloaded")
    return 1


if __name__ == "__main__":
    sys.exit(main())
