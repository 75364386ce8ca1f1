from __future__ import annotations

import threading
from typing import Any

from facecam.camera.backends.base import CameraConstraints, Frame
from facecam.camera.backends.stub import StubCameraBackend, StubMediaStream
from facecam.camera.models import DetectionResult, StillImage

SMALL = CameraConstraints(width=64, height=48)


class CountingBackend(StubCameraBackend):
    """Stub backend that records every stream it hands out."""

    name = "counting"

    def __init__(self) -> None:
        self.streams: list[StubMediaStream] = []
        self.max_open = 0

    @property
    def open_count(self) -> int:
        return sum(1 for stream in self.streams if not stream.released)

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        stream = StubMediaStream(constraints)
        self.streams.append(stream)
        self.max_open = max(self.max_open, self.open_count)
        return stream


class FailingBackend(StubCameraBackend):
    name = "failing"

    def __init__(self, error: Exception) -> None:
        self.error = error

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        raise self.error


class SlowBackend(CountingBackend):
    name = "slow"

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        self.entered.set()
        self.release.wait(5)
        return super().open(constraints)


class BlankStream(StubMediaStream):
    def read(self) -> Frame | None:
        return None


class BlankBackend(StubCameraBackend):
    name = "blank"

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        return BlankStream(constraints)


class FakeDetector:
    def __init__(self, result: DetectionResult | None = None, error: Exception | None = None) -> None:
        self.result = result or DetectionResult(image="AAA", face_count=1)
        self.error = error
        self.calls: list[StillImage] = []

    def detect(self, image: StillImage) -> DetectionResult:
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return self.result


class BlockingDetector(FakeDetector):
    """Detector that holds the request open until ``release`` is set."""

    def __init__(self, result: DetectionResult | None = None, error: Exception | None = None) -> None:
        super().__init__(result=result, error=error)
        self.entered = threading.Event()
        self.release = threading.Event()

    def detect(self, image: StillImage) -> DetectionResult:
        self.calls.append(image)
        self.entered.set()
        self.release.wait(5)
        if self.error is not None:
            raise self.error
        return self.result


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._body = body
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._body


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response

    def close(self) -> None:
        self.closed = True




class ArrayStream(StubMediaStream):
    """Stream that yields a fixed pixel array, optionally with declared dimensions."""

    def __init__(self, constraints: CameraConstraints, pixels: Any, size: tuple[int, int] | None = None) -> None:
        super().__init__(constraints)
        self.pixels = pixels
        self.size = size

    def read(self) -> Frame | None:
        if self.released:
            return None
        height, width = self.pixels.shape[:2]
        if self.size is not None:
            width, height = self.size
        return Frame(pixels=self.pixels, width=width, height=height)


class ArrayBackend(StubCameraBackend):
    name = "array"

    def __init__(self, pixels: Any, size: tuple[int, int] | None = None) -> None:
        self.pixels = pixels
        self.size = size

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        return ArrayStream(constraints, self.pixels, self.size)


class FlakyStream(StubMediaStream):
    """Live stream that can be told to stop delivering frames."""

    blank = False

    def read(self) -> Frame | None:
        if self.blank:
            return None
        return super().read()


class FlakyBackend(CountingBackend):
    name = "flaky"

    def open(self, constraints: CameraConstraints) -> StubMediaStream:
        stream = FlakyStream(constraints)
        self.streams.append(stream)
        self.max_open = max(self.max_open, self.open_count)
        return stream
