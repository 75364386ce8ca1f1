from __future__ import annotations

import threading
from dataclasses import dataclass

import cv2
import numpy

_BOX_COLOR = (0, 255, 0)
_BOX_THICKNESS = 3


class FaceDetectionFailure(Exception):
    pass


class ResultEncodingFailure(Exception):
    pass


@dataclass(frozen=True)
class FaceBox:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class AnnotatedImage:
    data: bytes
    faces: list[FaceBox]

    @property
    def face_count(self) -> int:
        return len(self.faces)


def default_cascade_path() -> str:
    return cv2.data.haarcascades + "haarcascade_frontalface_default.xml"


class HaarFaceDetector:
    def __init__(self, cascade_path: str | None = None):
        self.cascade_path = cascade_path or default_cascade_path()
        self._classifier: cv2.CascadeClassifier | None = None
        # CascadeClassifier is not safe to share across request threads.
        self._lock = threading.Lock()

    def _load(self) -> cv2.CascadeClassifier:
        if self._classifier is None:
            try:
                classifier = cv2.CascadeClassifier(self.cascade_path)
            except cv2.error as exc:
                raise FaceDetectionFailure("failed to load face classifier") from exc
            if classifier.empty():
                raise FaceDetectionFailure("failed to load face classifier")
            self._classifier = classifier
        return self._classifier

    def annotate(self, data: bytes) -> AnnotatedImage:
        if not data:
            raise FaceDetectionFailure("image data is empty")
        image = cv2.imdecode(numpy.frombuffer(data, dtype=numpy.uint8), cv2.IMREAD_COLOR)
        if image is None:
            raise FaceDetectionFailure("image: unknown format")

        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        with self._lock:
            rects = self._load().detectMultiScale(gray)
        faces = [FaceBox(x=int(x), y=int(y), w=int(w), h=int(h)) for x, y, w, h in rects]
        for face in faces:
            cv2.rectangle(
                image,
                (face.x, face.y),
                (face.x + face.w, face.y + face.h),
                _BOX_COLOR,
                _BOX_THICKNESS,
                cv2.LINE_AA,
            )

        success, buffer = cv2.imencode(".jpg", image)
        if not success:
            raise ResultEncodingFailure("jpeg encoder rejected the annotated image")
        return AnnotatedImage(data=buffer.tobytes(), faces=faces)
