"""
Face Embedding Inference

Wraps the YuNet (face detection) and SFace (face embedding) ONNX models behind
a single-method capability: ``embed(image) -> vector | None``.

Models are loaded lazily on first use, once per process, so importing this
module never touches the filesystem.

Exports:
- EmbeddingProvider: protocol every embedding backend satisfies
- SFaceEmbedder: OpenCV YuNet + SFace implementation (128-dim vectors)
- get_embedding_provider: process-wide SFaceEmbedder
"""

import os
import threading
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np

from ..core.config import settings, ModelSettings
from ..core.exceptions import ModelLoadError
from ..core.logger import get_logger

logger = get_logger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that turns a BGR image into a face descriptor."""

    def embed(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Return a 1-D float32 descriptor, or None when no face is found."""
        ...


def freeze_vector(vector) -> np.ndarray:
    """Flatten to a read-only float32 copy."""
    arr = np.array(vector, dtype=np.float32).reshape(-1)
    arr.flags.writeable = False
    return arr


class SFaceEmbedder:
    """
    YuNet detector + SFace recognizer.

    Picks the highest-scoring detected face, aligns it and returns its
    128-dim SFace feature.
    """

    def __init__(self, config: Optional[ModelSettings] = None):
        self.config = config or settings.models
        self._detector = None
        self._recognizer = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._detector is not None and self._recognizer is not None

    def _verify_model_file(self, path: str, model_name: str) -> None:
        if os.path.exists(path):
            return
        if self.config.auto_download_models:
            from .download_models import download_all

            logger.warning(f"{model_name} model not found at {path}. Attempting to download...")
            download_all(self.config.models_path)
        if not os.path.exists(path):
            raise ModelLoadError(model_name, path, details="model file not found")

    def load(self) -> "SFaceEmbedder":
        """Load both models (idempotent, thread-safe)."""
        with self._lock:
            if self.loaded:
                return self

            cfg = self.config
            self._verify_model_file(cfg.yunet_path, "YuNet")
            self._verify_model_file(cfg.sface_path, "SFace")

            try:
                detector = cv2.FaceDetectorYN.create(
                    model=cfg.yunet_path,
                    config="",
                    input_size=tuple(cfg.yunet_input_size),
                    score_threshold=cfg.yunet_score_threshold,
                    nms_threshold=cfg.yunet_nms_threshold,
                    top_k=cfg.yunet_top_k,
                )
            except cv2.error as e:
                raise ModelLoadError("YuNet", cfg.yunet_path, details=str(e))

            try:
                recognizer = cv2.FaceRecognizerSF.create(
                    model=cfg.sface_path,
                    config="",
                    backend_id=cv2.dnn.DNN_BACKEND_DEFAULT,
                    target_id=cv2.dnn.DNN_TARGET_CPU,
                )
            except cv2.error as e:
                raise ModelLoadError("SFace", cfg.sface_path, details=str(e))

            self._detector = detector
            self._recognizer = recognizer
            logger.info("YuNet and SFace models loaded")
            return self

    def detect_faces(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """
        Detect faces in a BGR image using YuNet.

        Returns:
            np.ndarray shape [num_faces, 15] rescaled to the frame size,
            or None if no faces were detected
        """
        if frame is None or not hasattr(frame, "shape"):
            raise ValueError("Frame is None or invalid")

        self.load()
        input_size: Tuple[int, int] = tuple(self.config.yunet_input_size)

        # YuNet holds per-call input size state
        with self._lock:
            resized = cv2.resize(frame, input_size)
            self._detector.setInputSize(input_size)
            _, faces = self._detector.detect(resized)

        if faces is None or len(faces) == 0:
            return None

        sx = frame.shape[1] / input_size[0]
        sy = frame.shape[0] / input_size[1]

        faces_rescaled = faces.astype(np.float32).copy()
        faces_rescaled[:, [0, 2, 4, 6, 8, 10, 12]] *= sx  # x, w, landmark x
        faces_rescaled[:, [1, 3, 5, 7, 9, 11, 13]] *= sy  # y, h, landmark y
        return faces_rescaled

    def embed(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Return the SFace descriptor of the best face, or None if there is no face."""
        faces = self.detect_faces(image)
        if faces is None:
            return None

        best = faces[int(np.argmax(faces[:, 14]))]
        with self._lock:
            aligned = self._recognizer.alignCrop(image, best)
            feature = self._recognizer.feature(aligned)
        if feature is None:
            return None

        vector = freeze_vector(feature)
        if vector.shape[0] != self.config.sface_feature_dim:
            logger.warning(f"Unexpected feature dimension: {vector.shape[0]}")
        return vector


_provider: Optional[SFaceEmbedder] = None
_provider_lock = threading.Lock()


def get_embedding_provider() -> SFaceEmbedder:
    """Get the process-wide SFace embedder, loading models on first call."""
    global _provider
    with _provider_lock:
        if _provider is None:
            _provider = SFaceEmbedder().load()
        return _provider


__all__ = [
    "EmbeddingProvider",
    "SFaceEmbedder",
    "freeze_vector",
    "get_embedding_provider",
]
