"""Ownership of the live camera stream."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from facecam.camera.backends.base import CameraBackend, CameraConstraints, Frame, MediaStream
from facecam.camera.backends.stub import StubCameraBackend
from facecam.config import CameraConfig, get_camera_config
from facecam.errors import DeviceAccessError, NoFrameAvailableError
from facecam.logging.audit import audit_event


@dataclass
class CameraSession:
    stream: MediaStream
    constraints: CameraConstraints
    started_at: float = field(default_factory=time.time)
    active: bool = True


class FrameSource:
    """Holds at most one :class:`CameraSession` and hands out its live frames.

    Every acquisition goes through :meth:`start`, which releases the previous
    session before opening a new one, so a device handle is never held twice.
    """

    def __init__(self, backend: CameraBackend, constraints: CameraConstraints | None = None):
        self._backend = backend
        self._constraints = constraints or CameraConstraints()
        self._session: CameraSession | None = None

    @classmethod
    def from_config(cls, config: CameraConfig | None = None) -> "FrameSource":
        config = config or get_camera_config()
        constraints = CameraConstraints(
            width=config.width,
            height=config.height,
            facing_mode=config.facing_mode,
        )
        return cls(_get_backend(config), constraints)

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def session(self) -> CameraSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None and self._session.active

    def start(self) -> CameraSession:
        self.stop()
        try:
            stream = self._backend.open(self._constraints)
        except DeviceAccessError as exc:
            audit_event("camera.start", backend=self._backend.name, result="denied", reason=exc.message)
            raise
        except Exception as exc:
            audit_event("camera.start", backend=self._backend.name, result="denied", reason=str(exc))
            raise DeviceAccessError(str(exc) or DeviceAccessError.default_message) from exc
        self._session = CameraSession(stream=stream, constraints=self._constraints)
        audit_event(
            "camera.start",
            backend=self._backend.name,
            result="started",
            width=self._constraints.width,
            height=self._constraints.height,
            facing_mode=self._constraints.facing_mode,
        )
        return self._session

    def stop(self) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        session.active = False
        session.stream.release()
        audit_event("camera.stop", backend=self._backend.name, uptime_s=round(time.time() - session.started_at, 3))

    def read_frame(self) -> Frame:
        session = self._session
        if session is None or not session.active:
            raise NoFrameAvailableError("Camera is not active.")
        frame = session.stream.read()
        if frame is None or frame.width <= 0 or frame.height <= 0:
            raise NoFrameAvailableError("Camera has not produced a frame yet.")
        return frame


def _get_backend(config: CameraConfig) -> CameraBackend:
    if config.backend == "opencv":
        from facecam.camera.backends.opencv import OpenCVCameraBackend

        return OpenCVCameraBackend(config.device_index)
    return StubCameraBackend()
