from __future__ import annotations

import numpy

from facecam.camera.backends.base import CameraBackend, CameraConstraints, Frame, MediaStream


class StubMediaStream(MediaStream):
    """Synthetic feed: a colour gradient whose phase shifts on every read."""

    def __init__(self, constraints: CameraConstraints):
        self._width = constraints.width
        self._height = constraints.height
        self._tick = 0
        self.released = False

    def read(self) -> Frame | None:
        if self.released:
            return None
        self._tick += 1
        columns = numpy.linspace(0, 255, self._width, dtype=numpy.float32)
        rows = numpy.linspace(0, 255, self._height, dtype=numpy.float32)
        pixels = numpy.empty((self._height, self._width, 3), dtype=numpy.uint8)
        pixels[:, :, 0] = ((columns[None, :] + self._tick * 7) % 256).astype(numpy.uint8)
        pixels[:, :, 1] = ((rows[:, None] + self._tick * 3) % 256).astype(numpy.uint8)
        pixels[:, :, 2] = self._tick % 256
        return Frame(pixels=pixels, width=self._width, height=self._height)

    def release(self) -> None:
        self.released = True


class StubCameraBackend(CameraBackend):
    name = "stub"

    def open(self, constraints: CameraConstraints) -> MediaStream:
        return StubMediaStream(constraints)
