"""Tests for the ONNX model downloader (network mocked)."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from celeb_lookalike.ml import download_models
from celeb_lookalike.ml.download_models import (
    MIN_MODEL_SIZE_BYTES,
    download_all,
    download_model,
    is_valid_model_file,
    model_files,
)

MODEL_BYTES = b"\0" * (MIN_MODEL_SIZE_BYTES + 10)


def _response(payload=MODEL_BYTES):
    response = MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = [payload[:1000], payload[1000:]]
    return response


@pytest.fixture
def mock_get():
    with patch.object(download_models.requests, "get", return_value=_response()) as mocked:
        yield mocked


def test_registry_uses_configured_filenames():
    files = model_files()
    assert set(files) == {"yunet", "sface"}
    assert files["yunet"].url.endswith(".onnx")


def test_downloads_missing_model(tmp_path, mock_get):
    assert download_model("sface", str(tmp_path)) is True

    dest = tmp_path / model_files()["sface"].filename
    assert dest.read_bytes() == MODEL_BYTES
    assert not list(tmp_path.glob("*.part"))
    assert mock_get.call_args.kwargs["stream"] is True


def test_existing_model_not_redownloaded(tmp_path, mock_get):
    (tmp_path / model_files()["yunet"].filename).write_bytes(MODEL_BYTES)
    assert download_model("yunet", str(tmp_path)) is True
    mock_get.assert_not_called()


def test_truncated_model_replaced(tmp_path, mock_get):
    dest = tmp_path / model_files()["yunet"].filename
    dest.write_bytes(b"partial")
    assert download_model("yunet", str(tmp_path)) is True
    assert dest.stat().st_size == len(MODEL_BYTES)


def test_network_error(tmp_path):
    with patch.object(download_models.requests, "get", side_effect=requests.ConnectionError("offline")):
        assert download_model("yunet", str(tmp_path)) is False
    assert list(tmp_path.iterdir()) == []


def test_unknown_model(tmp_path):
    assert download_model("arcface", str(tmp_path)) is False


def test_download_all_creates_directory(tmp_path, mock_get):
    target = tmp_path / "models"
    assert download_all(str(target)) is True
    assert len(list(target.iterdir())) == 2


def test_hash_mismatch_is_invalid(tmp_path):
    path = tmp_path / "m.onnx"
    path.write_bytes(MODEL_BYTES)
    assert is_valid_model_file(str(path)) is True
    assert is_valid_model_file(str(path), sha256="0" * 64) is False
