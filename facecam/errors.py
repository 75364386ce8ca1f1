from __future__ import annotations


class FaceCamError(Exception):
    default_message = "Unexpected face camera error."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def kind(self) -> str:
        return type(self).__name__


class DeviceAccessError(FaceCamError):
    default_message = "Camera device is not accessible."


class NoFrameAvailableError(FaceCamError):
    default_message = "No camera frame available."


class DetectorError(FaceCamError):
    default_message = "Face detection failed"


class TransportError(DetectorError):
    default_message = "Detection service could not be reached."


class ServiceError(DetectorError):
    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(DetectorError):
    default_message = "Detection service returned an unexpected response."


class InvalidTransitionError(FaceCamError):
    default_message = "Operation not allowed in the current state."
