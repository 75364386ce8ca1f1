from __future__ import annotations

import cv2
import numpy

from facecam.camera.backends.base import Frame
from facecam.camera.frame_source import FrameSource
from facecam.camera.models import StillImage
from facecam.errors import NoFrameAvailableError
from facecam.logging.audit import audit_event


def _cv_message(exc: cv2.error) -> str:
    return getattr(exc, "msg", None) or str(exc)


class Capturer:
    def __init__(self, jpeg_quality: int = 92):
        self._jpeg_quality = min(max(int(jpeg_quality), 1), 100)

    def capture(self, frame_source: FrameSource) -> StillImage:
        frame = frame_source.read_frame()
        raster = self._render(frame)
        height, width = raster.shape[:2]
        try:
            success, buffer = cv2.imencode(".jpg", raster, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality])
        except cv2.error as exc:
            raise NoFrameAvailableError(f"Failed to encode frame: {_cv_message(exc)}") from exc
        if not success:
            raise NoFrameAvailableError("Failed to encode frame.")
        image = StillImage(data=buffer.tobytes(), width=int(width), height=int(height))
        audit_event(
            "camera.capture",
            backend=frame_source.backend_name,
            width=image.width,
            height=image.height,
            size=image.size,
        )
        return image

    @staticmethod
    def _render(frame: Frame) -> numpy.ndarray:
        width, height = int(frame.width), int(frame.height)
        if width <= 0 or height <= 0:
            raise NoFrameAvailableError("Camera frame is empty.")
        pixels = numpy.asarray(frame.pixels)
        if pixels.shape[:2] != (height, width):
            raise NoFrameAvailableError(f"Frame pixels {pixels.shape[:2]} do not match {height}x{width}.")
        if pixels.dtype != numpy.uint8:
            pixels = numpy.clip(numpy.nan_to_num(pixels), 0, 255).astype(numpy.uint8)
        try:
            if pixels.ndim == 2:
                pixels = cv2.cvtColor(pixels, cv2.COLOR_GRAY2BGR)
            elif pixels.ndim == 3 and pixels.shape[2] == 4:
                pixels = cv2.cvtColor(pixels, cv2.COLOR_BGRA2BGR)
            elif pixels.ndim != 3 or pixels.shape[2] != 3:
                raise NoFrameAvailableError(f"Unsupported frame layout {pixels.shape}.")
        except cv2.error as exc:
            raise NoFrameAvailableError(f"Failed to convert frame: {_cv_message(exc)}") from exc
        # Off-screen surface sized to the frame's intrinsic dimensions.
        surface = numpy.zeros((height, width, 3), dtype=numpy.uint8)
        numpy.copyto(surface, pixels)
        return surface
