from __future__ import annotations

import pytest

from facecam.config import get_camera_config, get_detector_config, get_service_config


def test_camera_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "FACECAM_CAMERA_BACKEND",
        "FACECAM_CAMERA_DEVICE_INDEX",
        "FACECAM_CAMERA_WIDTH",
        "FACECAM_CAMERA_HEIGHT",
        "FACECAM_CAMERA_FACING_MODE",
        "FACECAM_CAPTURE_JPEG_QUALITY",
    ):
        monkeypatch.delenv(name, raising=False)
    config = get_camera_config()
    assert config.backend == "stub"
    assert (config.width, config.height) == (1280, 720)
    assert config.facing_mode == "user"
    assert config.jpeg_quality == 92


def test_camera_config_falls_back_on_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FACECAM_CAMERA_BACKEND", "webrtc")
    monkeypatch.setenv("FACECAM_CAMERA_WIDTH", "wide")
    monkeypatch.setenv("FACECAM_CAMERA_HEIGHT", "-5")
    monkeypatch.setenv("FACECAM_CAPTURE_JPEG_QUALITY", "400")
    config = get_camera_config()
    assert config.backend == "stub"
    assert config.width == 1280
    assert config.height == 720
    assert config.jpeg_quality == 100


def test_detector_config_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FACECAM_DETECTOR_URL", "http://detector.local:9000/")
    monkeypatch.setenv("FACECAM_DETECTOR_TIMEOUT", "nope")
    config = get_detector_config()
    assert config.base_url == "http://detector.local:9000"
    assert config.timeout == 30.0


def test_service_config_origins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("PORT", "9090")
    config = get_service_config()
    assert config.allowed_origins == ("https://a.example", "https://b.example")
    assert config.port == 9090

    monkeypatch.delenv("ALLOWED_ORIGINS")
    assert "http://localhost:3000" in get_service_config().allowed_origins
