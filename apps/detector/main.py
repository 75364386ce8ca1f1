from __future__ import annotations

import base64
import binascii

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from facecam.config import ServiceConfig, get_service_config
from facecam.detector.haar import FaceDetectionFailure, HaarFaceDetector, ResultEncodingFailure
from facecam.detector.schemas import DetectFaceRequest, DetectFaceResponse
from facecam.logging.audit import audit_event, safe_excerpt
from facecam.logging.logger import get_logger


def _request_id(request: Request) -> str | None:
    return request.headers.get("X-Request-ID") or request.headers.get("X-Request-Id")


def _envelope(status_code: int, **fields: object) -> JSONResponse:
    body = DetectFaceResponse(**fields).model_dump(by_alias=True, exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _validation_summary(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location or 'body'}: {error.get('msg', 'invalid')}")
    return "; ".join(parts) or "malformed body"


def create_app(config: ServiceConfig | None = None, detector: HaarFaceDetector | None = None) -> FastAPI:
    config = config or get_service_config()
    detector = detector or HaarFaceDetector(config.cascade_path)
    get_logger()
    app = FastAPI(title="FaceCam Detector")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = f"Invalid request: {_validation_summary(exc)}"
        audit_event("service.detect", request_id=_request_id(request), result="invalid_request")
        return _envelope(status.HTTP_400_BAD_REQUEST, success=False, message=message)

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/detect-face")
    def detect_face(payload: DetectFaceRequest, request: Request) -> JSONResponse:
        request_id = _request_id(request)
        try:
            image_bytes = base64.b64decode(payload.image_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            audit_event("service.detect", request_id=request_id, result="bad_base64")
            return _envelope(
                status.HTTP_400_BAD_REQUEST,
                success=False,
                message=f"Failed to decode image: {safe_excerpt(str(exc))}",
            )
        if len(image_bytes) > config.max_image_bytes:
            audit_event("service.detect", request_id=request_id, result="image_too_large", size=len(image_bytes))
            return _envelope(413, success=False, message="Image exceeds configured size limit.")

        try:
            annotated = detector.annotate(image_bytes)
        except FaceDetectionFailure as exc:
            audit_event("service.detect", request_id=request_id, result="detection_failed")
            return _envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                success=False,
                message=f"Face detection failed: {exc}",
            )
        except ResultEncodingFailure as exc:
            audit_event("service.detect", request_id=request_id, result="encode_failed")
            return _envelope(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                success=False,
                message=f"Failed to encode result image: {exc}",
            )

        encoded = base64.b64encode(annotated.data).decode("ascii")
        audit_event(
            "service.detect",
            request_id=request_id,
            result="faces_detected",
            faces=annotated.face_count,
            size=len(image_bytes),
        )
        return _envelope(
            status.HTTP_200_OK,
            success=True,
            image_data=f"data:image/jpeg;base64,{encoded}",
            face_count=annotated.face_count,
            message=f"Detected {annotated.face_count} face(s)",
        )

    return app
