from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:80",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:80",
)


@dataclass(frozen=True)
class CameraConfig:
    backend: str
    device_index: int
    width: int
    height: int
    facing_mode: str
    jpeg_quality: int


@dataclass(frozen=True)
class DetectorConfig:
    base_url: str
    timeout: float


@dataclass(frozen=True)
class ServiceConfig:
    host: str
    port: int
    allowed_origins: tuple[str, ...]
    max_image_bytes: int
    cascade_path: str | None


def _parse_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_origins(value: str | None) -> tuple[str, ...]:
    if not value:
        return _DEFAULT_ALLOWED_ORIGINS
    origins = tuple(origin.strip() for origin in value.split(",") if origin.strip())
    return origins or _DEFAULT_ALLOWED_ORIGINS


def get_camera_config() -> CameraConfig:
    backend = os.getenv("FACECAM_CAMERA_BACKEND", "stub").strip().lower()
    if backend not in {"stub", "opencv"}:
        backend = "stub"
    width = _parse_int(os.getenv("FACECAM_CAMERA_WIDTH"), 1280)
    height = _parse_int(os.getenv("FACECAM_CAMERA_HEIGHT"), 720)
    quality = _parse_int(os.getenv("FACECAM_CAPTURE_JPEG_QUALITY"), 92)
    return CameraConfig(
        backend=backend,
        device_index=_parse_int(os.getenv("FACECAM_CAMERA_DEVICE_INDEX"), 0),
        width=width if width > 0 else 1280,
        height=height if height > 0 else 720,
        facing_mode=os.getenv("FACECAM_CAMERA_FACING_MODE", "user").strip().lower() or "user",
        jpeg_quality=min(max(quality, 1), 100),
    )


def get_detector_config() -> DetectorConfig:
    base_url = os.getenv("FACECAM_DETECTOR_URL", "http://127.0.0.1:8080").strip()
    timeout = _parse_float(os.getenv("FACECAM_DETECTOR_TIMEOUT"), 30.0)
    return DetectorConfig(
        base_url=(base_url or "http://127.0.0.1:8080").rstrip("/"),
        timeout=timeout if timeout > 0 else 30.0,
    )


def get_service_config() -> ServiceConfig:
    cascade_path = os.getenv("FACECAM_CASCADE_PATH", "").strip() or None
    return ServiceConfig(
        host=os.getenv("FACECAM_SERVICE_HOST", "127.0.0.1"),
        port=_parse_int(os.getenv("PORT"), 8080),
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS")),
        max_image_bytes=_parse_int(os.getenv("FACECAM_MAX_IMAGE_BYTES"), 10_000_000),
        cascade_path=cascade_path,
    )
