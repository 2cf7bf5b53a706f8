"""Tests for upload validation and image decoding."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from celeb_lookalike.core.exceptions import (
    ImageTooLargeError,
    ImageTooSmallError,
    InvalidImageError,
    UnsupportedFormatError,
)
from celeb_lookalike.utils import image_loader

MIN_BYTES = 5000
MAX_BYTES = 15 * 1024 * 1024


class TestValidateUpload:

    @pytest.mark.parametrize("fmt,expected", [("PNG", "png"), ("JPEG", "jpeg")])
    def test_accepts_allowed_formats(self, make_image, fmt, expected):
        data = make_image(80, fmt)
        detected, size = image_loader.validate_upload(data, MIN_BYTES, MAX_BYTES)
        assert detected == expected
        assert size == len(data)

    def test_empty_upload(self):
        with pytest.raises(InvalidImageError, match="Image required"):
            image_loader.validate_upload(b"", MIN_BYTES, MAX_BYTES)

    def test_too_small(self, tiny_png):
        with pytest.raises(ImageTooSmallError) as exc_info:
            image_loader.validate_upload(tiny_png, MIN_BYTES, MAX_BYTES)
        assert exc_info.value.size == len(tiny_png)

    def test_too_large(self, make_image):
        data = make_image(80)
        with pytest.raises(ImageTooLargeError):
            image_loader.validate_upload(data, MIN_BYTES, len(data) - 1)

    def test_unsupported_format(self, make_image):
        data = make_image(80, "BMP")
        with pytest.raises(UnsupportedFormatError) as exc_info:
            image_loader.validate_upload(data, MIN_BYTES, MAX_BYTES)
        assert exc_info.value.format == "bmp"

    def test_not_an_image(self):
        with pytest.raises(UnsupportedFormatError):
            image_loader.validate_upload(b"x" * MIN_BYTES, MIN_BYTES, MAX_BYTES)

    def test_size_checked_before_format(self):
        # garbage that is also too small reports the size problem
        with pytest.raises(ImageTooSmallError):
            image_loader.validate_upload(b"garbage", MIN_BYTES, MAX_BYTES)

    def test_validation_errors_are_invalid_image_errors(self, tiny_png):
        with pytest.raises(InvalidImageError):
            image_loader.validate_upload(tiny_png, MIN_BYTES, MAX_BYTES)


class TestLoading:

    def test_load_from_bytes_returns_bgr(self, make_image):
        img = image_loader.load_from_bytes(make_image(64, height=32))
        assert img.shape == (32, 64, 3)
        assert img.dtype.name == "uint8"

    def test_load_from_bytes_rejects_garbage(self):
        with pytest.raises(ValueError):
            image_loader.load_from_bytes(b"not an image")

    def test_detect_format(self, make_image):
        assert image_loader.detect_format(make_image(16, "JPEG", height=16)) == "jpeg"
        assert image_loader.detect_format(b"nope") is None


class TestFetch:

    def test_fetch_bytes_sends_user_agent(self):
        response = MagicMock(content=b"img")
        with patch("celeb_lookalike.utils.image_loader.requests.get", return_value=response) as mock_get:
            assert image_loader.fetch_bytes("https://img.example/a.jpg", timeout=3) == b"img"

        _, kwargs = mock_get.call_args
        assert kwargs["headers"]["User-Agent"]
        assert kwargs["timeout"] == 3
        response.raise_for_status.assert_called_once()

    def test_fetch_bytes_raises_on_http_error(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        with patch("celeb_lookalike.utils.image_loader.requests.get", return_value=response):
            with pytest.raises(requests.HTTPError):
                image_loader.fetch_bytes("https://img.example/missing.jpg")
