from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from facecam.camera.models import DetectionResult, StillImage
from facecam.errors import FaceCamError


class Phase(str, Enum):
    IDLE = "idle"
    CAMERA_ACTIVE = "camera_active"
    CAPTURED = "captured"
    DETECTING = "detecting"
    RESULT = "result"


@dataclass(frozen=True)
class ErrorInfo:
    kind: str
    message: str


@dataclass(frozen=True)
class WorkflowSnapshot:
    phase: Phase
    camera_active: bool
    captured_image: StillImage | None
    detection_result: DetectionResult | None
    busy: bool
    error: ErrorInfo | None

    @property
    def can_detect(self) -> bool:
        return self.captured_image is not None and not self.busy


@dataclass(frozen=True)
class Outcome:
    """Tagged result of a controller operation."""

    ok: bool
    error: FaceCamError | None = None
    stale: bool = False

    @classmethod
    def success(cls) -> "Outcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: FaceCamError) -> "Outcome":
        return cls(ok=False, error=error)

    @classmethod
    def discarded(cls, error: FaceCamError | None = None) -> "Outcome":
        return cls(ok=False, error=error, stale=True)
