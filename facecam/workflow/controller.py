"""Capture and detection workflow.

The controller is the only place where collaborator failures are turned into
user-visible state. Every public operation returns an :class:`Outcome` and
never raises a :class:`~facecam.errors.FaceCamError`.

Asynchronous results are tied to the generation they were started in.
``capture``, ``reset`` and ``stop`` move the generation forward, so a detection
response that arrives afterwards is dropped instead of overwriting newer state.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from facecam.camera.capturer import Capturer
from facecam.camera.frame_source import FrameSource
from facecam.camera.models import DetectionResult, StillImage
from facecam.config import get_camera_config
from facecam.detector.client import DetectorClient
from facecam.errors import (
    DetectorError,
    DeviceAccessError,
    FaceCamError,
    InvalidTransitionError,
    NoFrameAvailableError,
)
from facecam.logging.audit import audit_event
from facecam.logging.logger import get_logger
from facecam.workflow.state import ErrorInfo, Outcome, Phase, WorkflowSnapshot

logger = get_logger("workflow")


class Detector(Protocol):
    def detect(self, image: StillImage) -> DetectionResult:
        ...


class WorkflowController:
    def __init__(self, frame_source: FrameSource, capturer: Capturer, detector: Detector):
        self._frame_source = frame_source
        self._capturer = capturer
        self._detector = detector
        self._captured: StillImage | None = None
        self._result: DetectionResult | None = None
        self._error: ErrorInfo | None = None
        self._generation = 0
        self._camera_epoch = 0
        self._pending_generation: int | None = None
        self._starting = False

    @classmethod
    def from_config(cls) -> "WorkflowController":
        camera_config = get_camera_config()
        return cls(
            FrameSource.from_config(camera_config),
            Capturer(jpeg_quality=camera_config.jpeg_quality),
            DetectorClient(),
        )

    async def __aenter__(self) -> "WorkflowController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def busy(self) -> bool:
        return self._pending_generation is not None

    @property
    def phase(self) -> Phase:
        if self._pending_generation is not None and self._pending_generation == self._generation:
            return Phase.DETECTING
        if self._result is not None:
            return Phase.RESULT
        if self._captured is not None:
            return Phase.CAPTURED
        if self._frame_source.is_active:
            return Phase.CAMERA_ACTIVE
        return Phase.IDLE

    @property
    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            phase=self.phase,
            camera_active=self._frame_source.is_active,
            captured_image=self._captured,
            detection_result=self._result,
            busy=self.busy,
            error=self._error,
        )

    @property
    def can_detect(self) -> bool:
        return self._captured is not None and not self.busy

    async def start(self) -> Outcome:
        if self._frame_source.is_active:
            return Outcome.success()
        if self._starting:
            return self._reject("start", InvalidTransitionError("Camera is already starting."))

        self._starting = True
        self._error = None
        epoch = self._camera_epoch
        try:
            await asyncio.to_thread(self._frame_source.start)
        except DeviceAccessError as exc:
            if epoch != self._camera_epoch:
                audit_event("workflow.start", result="stale", reason=exc.message)
                return Outcome.discarded(exc)
            self._record("start", exc, "Failed to access camera")
            return Outcome.failure(exc)
        finally:
            self._starting = False

        if epoch != self._camera_epoch:
            # stop() ran while the device was opening; drop the late session.
            self._frame_source.stop()
            audit_event("workflow.start", result="stale")
            return Outcome.discarded()
        audit_event("workflow.start", result="ok", phase=self.phase.value)
        return Outcome.success()

    def stop(self) -> Outcome:
        self._camera_epoch += 1
        self._generation += 1
        self._frame_source.stop()
        self._captured = None
        self._result = None
        self._error = None
        audit_event("workflow.stop", busy=self.busy)
        return Outcome.success()

    def capture(self) -> Outcome:
        try:
            image = self._capturer.capture(self._frame_source)
        except NoFrameAvailableError as exc:
            self._record("capture", exc, "Failed to capture photo")
            return Outcome.failure(exc)
        self._generation += 1
        self._captured = image
        self._result = None
        self._error = None
        audit_event("workflow.capture", result="ok", width=image.width, height=image.height)
        return Outcome.success()

    async def detect(self) -> Outcome:
        if self._pending_generation is not None:
            return self._reject("detect", InvalidTransitionError("Face detection is already in progress."))
        image = self._captured
        if image is None:
            exc = InvalidTransitionError("Please capture a photo first")
            self._error = ErrorInfo(kind=exc.kind, message=exc.message)
            audit_event("workflow.detect", result="rejected", reason=exc.message)
            return Outcome.failure(exc)

        generation = self._generation
        self._pending_generation = generation
        self._result = None
        self._error = None
        audit_event("workflow.detect", result="submitted", size=image.size)

        result: DetectionResult | None = None
        error: DetectorError | None = None
        try:
            result = await asyncio.to_thread(self._detector.detect, image)
        except DetectorError as exc:
            error = exc
        finally:
            self._pending_generation = None

        if generation != self._generation or self._captured is not image:
            logger.info("discarding detection response for an abandoned capture")
            audit_event("workflow.detect", result="stale", failed=error is not None)
            return Outcome.discarded(error)
        if error is not None:
            self._record("detect", error, "Face detection error")
            return Outcome.failure(error)

        self._result = result
        audit_event("workflow.detect", result="ok", faces=result.face_count)
        return Outcome.success()

    def reset(self) -> Outcome:
        self._generation += 1
        self._captured = None
        self._result = None
        self._error = None
        audit_event("workflow.reset", camera_active=self._frame_source.is_active)
        return Outcome.success()

    def close(self) -> None:
        self.stop()
        close_detector = getattr(self._detector, "close", None)
        if callable(close_detector):
            close_detector()

    def _record(self, operation: str, exc: FaceCamError, prefix: str) -> None:
        self._error = ErrorInfo(kind=exc.kind, message=f"{prefix}: {exc.message}")
        logger.warning("%s failed: %s", operation, exc.message)
        audit_event(f"workflow.{operation}", result="error", kind=exc.kind)

    def _reject(self, operation: str, exc: InvalidTransitionError) -> Outcome:
        logger.info("%s rejected: %s", operation, exc.message)
        audit_event(f"workflow.{operation}", result="rejected", reason=exc.message)
        return Outcome.failure(exc)
