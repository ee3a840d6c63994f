# sailbridge/errors.py
from typing import Any, Dict


class BridgeError(Exception):
    """Base error rendered as ``{"code", "message", **extra}`` by the app."""

    code = "INTERNAL"
    status_code = 500

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.extra}


class InvalidRequest(BridgeError):
    code = "INVALID_REQUEST"
    status_code = 400


class Unauthorized(BridgeError):
    code = "UNAUTHORIZED"
    status_code = 401


class Forbidden(BridgeError):
    code = "FORBIDDEN"
    status_code = 403


class AccessDenied(BridgeError):
    code = "ACCESS_DENIED"
    status_code = 403


class NotFound(BridgeError):
    code = "NOT_FOUND"
    status_code = 404


class NotADirectory(BridgeError):
    code = "NOT_DIRECTORY"
    status_code = 400


class FileTooLarge(BridgeError):
    code = "FILE_TOO_LARGE"
    status_code = 413

    def __init__(self, size: int, limit: int):
        super().__init__(f"File too large: {size} bytes (max: {limit})", size=size, limit=limit)
        self.size = size
        self.limit = limit


class InternalError(BridgeError):
    code = "INTERNAL"
    status_code = 500
