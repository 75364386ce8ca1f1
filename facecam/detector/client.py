from __future__ import annotations

from typing import Any

import requests
from pydantic import ValidationError

from facecam.camera.models import DetectionResult, StillImage
from facecam.config import DetectorConfig, get_detector_config
from facecam.detector.schemas import DetectFaceResponse
from facecam.errors import DetectorError, MalformedResponseError, ServiceError, TransportError
from facecam.logging.audit import audit_event

DETECT_FACE_PATH = "/api/detect-face"


class DetectorClient:
    """Client for the face detection service.

    One call to :meth:`detect` issues exactly one POST; retrying is left to the
    caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        config: DetectorConfig | None = None
        if base_url is None or timeout is None:
            config = get_detector_config()
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}{DETECT_FACE_PATH}"

    def detect(self, image: StillImage) -> DetectionResult:
        payload = {"imageData": image.to_base64()}
        try:
            response = self._session.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            audit_event("detector.request", url=self.url, result="transport_error", size=image.size)
            raise TransportError(f"Detection request failed: {exc}") from exc

        body = self._json_body(response)
        if not response.ok:
            audit_event("detector.request", url=self.url, result="service_error", status=response.status_code)
            raise ServiceError(self._service_message(body), status_code=response.status_code)
        if not isinstance(body, dict):
            audit_event("detector.request", url=self.url, result="malformed", status=response.status_code)
            raise MalformedResponseError("Detection response is not a JSON object.")

        try:
            parsed = DetectFaceResponse.model_validate(body)
        except ValidationError as exc:
            audit_event("detector.request", url=self.url, result="malformed", status=response.status_code)
            raise MalformedResponseError(f"Detection response has unexpected shape: {exc.error_count()} error(s).") from exc

        if not parsed.success:
            audit_event("detector.request", url=self.url, result="service_error", status=response.status_code)
            raise ServiceError(parsed.message or DetectorError.default_message, status_code=response.status_code)
        if not parsed.image_data or parsed.face_count is None:
            audit_event("detector.request", url=self.url, result="malformed", status=response.status_code)
            raise MalformedResponseError("Detection response is missing imageData or faceCount.")

        audit_event("detector.request", url=self.url, result="ok", faces=parsed.face_count)
        return DetectionResult(image=parsed.image_data, face_count=parsed.face_count, message=parsed.message)

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _json_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _service_message(body: Any) -> str:
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return message
        return DetectorError.default_message
