from __future__ import annotations

import base64
import binascii
import time
from dataclasses import dataclass, field

_DATA_URI_PREFIX = "data:"


def strip_data_uri(value: str) -> str:
    """Return the base64 payload of ``value``, dropping a ``data:...;base64,`` prefix if present."""
    text = value.strip()
    if text.startswith(_DATA_URI_PREFIX) and "," in text:
        return text.split(",", 1)[1]
    return text


def decode_base64_payload(value: str) -> bytes:
    payload = strip_data_uri(value)
    padding = (-len(payload)) % 4
    try:
        return base64.b64decode(payload + "=" * padding, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc


@dataclass(frozen=True)
class StillImage:
    data: bytes
    width: int
    height: int
    mime_type: str = "image/jpeg"
    captured_at: float = field(default_factory=time.time)

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    @classmethod
    def from_base64(cls, value: str, *, width: int, height: int) -> "StillImage":
        text = value.strip()
        mime_type = "image/jpeg"
        if text.startswith(_DATA_URI_PREFIX) and ";" in text:
            mime_type = text[len(_DATA_URI_PREFIX):text.index(";")] or mime_type
        return cls(data=decode_base64_payload(text), width=width, height=height, mime_type=mime_type)


@dataclass(frozen=True)
class DetectionResult:
    image: str
    face_count: int
    message: str | None = None

    def image_bytes(self) -> bytes:
        return decode_base64_payload(self.image)

    @property
    def label(self) -> str:
        noun = "Face" if self.face_count == 1 else "Faces"
        return f"{self.face_count} {noun} Detected"
