from __future__ import annotations

import pytest

from facecam.camera.models import DetectionResult, StillImage, decode_base64_payload, strip_data_uri


def test_strip_data_uri_prefix() -> None:
    assert strip_data_uri("data:image/jpeg;base64,QUJD") == "QUJD"
    assert strip_data_uri("QUJD") == "QUJD"


def test_still_image_base64_has_no_prefix() -> None:
    image = StillImage(data=b"ABC", width=1, height=1)
    assert image.to_base64() == "QUJD"
    assert image.to_data_uri() == "data:image/jpeg;base64,QUJD"


def test_still_image_from_data_uri_keeps_mime_type() -> None:
    image = StillImage.from_base64("data:image/png;base64,QUJD", width=2, height=2)
    assert image.data == b"ABC"
    assert image.mime_type == "image/png"


def test_detection_result_keeps_image_verbatim() -> None:
    result = DetectionResult(image="AAA", face_count=2)
    assert result.image == "AAA"
    assert result.image_bytes() == b"\x00\x00"


def test_decode_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        decode_base64_payload("not base64!!")


@pytest.mark.parametrize("count, label", [(0, "0 Faces Detected"), (1, "1 Face Detected"), (3, "3 Faces Detected")])
def test_detection_label(count: int, label: str) -> None:
    assert DetectionResult(image="", face_count=count).label == label
