"""Shared test fixtures: fake embedder, generated images, app client."""

import io

import numpy as np
import pytest
from PIL import Image
from starlette.testclient import TestClient

from celeb_lookalike.core.state import app_state
from celeb_lookalike.pipelines.gallery import Gallery


class FakeEmbedder:
    """
    Deterministic embedding provider.

    Images are told apart by their width: ``vectors[width]`` is returned,
    and widths with no vector mean "no face".
    """

    def __init__(self, vectors=None):
        self.vectors = dict(vectors or {})
        self.calls = 0

    def embed(self, image):
        self.calls += 1
        vector = self.vectors.get(image.shape[1])
        if vector is None:
            return None
        return np.asarray(vector, dtype=np.float32)


def _noise_image(width, height=120, seed=0):
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return Image.fromarray(pixels)


def encode_image(width, fmt="PNG", height=120, seed=0):
    """Noise image bytes; noise keeps even small images above the upload minimum."""
    buf = io.BytesIO()
    img = _noise_image(width, height, seed)
    if fmt == "JPEG":
        img.save(buf, format=fmt, quality=95)
    else:
        img.save(buf, format=fmt)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Image fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def make_image():
    """Factory: make_image(width, fmt="PNG") -> encoded bytes."""
    return encode_image


@pytest.fixture
def tiny_png():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Gallery fixtures
# ---------------------------------------------------------------------------

QUERY_WIDTH = 80


@pytest.fixture
def xy_gallery():
    """Two orthogonal entries, X and Y."""
    return Gallery.from_vectors([
        ("X", [1.0, 0.0], "https://img.example/x.jpg"),
        ("Y", [0.0, 1.0], "https://img.example/y.jpg"),
    ])


@pytest.fixture
def fake_embedder():
    return FakeEmbedder({QUERY_WIDTH: [0.9, 0.1]})


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def ready_state(xy_gallery, fake_embedder):
    """App state with the X/Y gallery and fake embedder installed."""
    app_state.reset()
    app_state.embedder = fake_embedder
    app_state.swap_gallery(xy_gallery)
    yield app_state
    app_state.reset()


@pytest.fixture
def empty_state():
    """App state before startup has run."""
    app_state.reset()
    yield app_state
    app_state.reset()


@pytest.fixture
def app():
    """FastAPI app without the model-loading lifespan."""
    from celeb_lookalike.main import create_app
    application = create_app(with_lifespan=False)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)
