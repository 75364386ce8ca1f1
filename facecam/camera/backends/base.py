from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class CameraConstraints:
    width: int = 1280
    height: int = 720
    facing_mode: str = "user"
    audio: bool = False


@dataclass(frozen=True)
class Frame:
    pixels: Any
    width: int
    height: int


class MediaStream(Protocol):
    def read(self) -> Frame | None:
        ...

    def release(self) -> None:
        ...


class CameraBackend(Protocol):
    name: str

    def open(self, constraints: CameraConstraints) -> MediaStream:
        ...
