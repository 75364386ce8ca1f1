from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from facecam.camera.models import StillImage  # noqa: E402


@pytest.fixture
def still_image() -> StillImage:
    return StillImage(data=b"\xff\xd8\xff\xe0fake-jpeg", width=4, height=3)
