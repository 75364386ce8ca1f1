from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, field_validator


class DetectFaceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: StrictStr = Field(alias="imageData", min_length=1)


class DetectFaceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: StrictBool
    message: str | None = None
    image_data: StrictStr | None = Field(default=None, alias="imageData")
    face_count: StrictInt | None = Field(default=None, alias="faceCount", ge=0)

    @field_validator("message", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        # Only human-readable text is surfaced; anything else is treated as absent.
        if isinstance(value, str) and value.strip():
            return value
        return None
