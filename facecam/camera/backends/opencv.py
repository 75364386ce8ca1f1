from __future__ import annotations

from typing import Any

import cv2

from facecam.camera.backends.base import CameraBackend, CameraConstraints, Frame, MediaStream
from facecam.errors import DeviceAccessError
from facecam.logging.logger import get_logger


class OpenCVMediaStream(MediaStream):
    def __init__(self, capture: Any):
        self._capture = capture

    def read(self) -> Frame | None:
        if self._capture is None or not self._capture.isOpened():
            return None
        success, pixels = self._capture.read()
        if not success or pixels is None:
            return None
        height, width = pixels.shape[:2]
        return Frame(pixels=pixels, width=int(width), height=int(height))

    def release(self) -> None:
        if self._capture is not None and self._capture.isOpened():
            self._capture.release()
        self._capture = None


class OpenCVCameraBackend(CameraBackend):
    name = "opencv"

    def __init__(self, device_index: int = 0):
        self._device_index = device_index

    def open(self, constraints: CameraConstraints) -> MediaStream:
        capture = cv2.VideoCapture(self._device_index)
        if not capture or not capture.isOpened():
            raise DeviceAccessError(f"Camera device {self._device_index} not available.")
        # Resolution is a preference; the driver may settle on another mode.
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, constraints.width)
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, constraints.height)
        if constraints.facing_mode != "user":
            get_logger("camera").info(
                "facing mode %r has no effect on device %s", constraints.facing_mode, self._device_index
            )
        return OpenCVMediaStream(capture)
