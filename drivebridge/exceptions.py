class DriveBridgeError(Exception):
    """Base error. Carries the {code, message, status} triple surfaced to callers."""

    code = "UNKNOWN_ERROR"
    status = 500

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "status": self.status}


class AuthenticationError(DriveBridgeError):
    """Raised when the session token is missing, malformed, or rejected upstream."""

    code = "NOT_INITIALIZED"
    status = 401


class InvalidRequestError(DriveBridgeError):
    """Raised when caller-supplied arguments fail validation before any request is sent."""

    code = "INVALID_ARGUMENT"
    status = 400


class IntegrationError(DriveBridgeError):
    """Raised when a Drive API call fails."""

    code = "REQUEST_FAILED"
    status = 502


class RateLimitError(IntegrationError):
    """Raised when the Drive API answers 429."""

    code = "HTTP_429"
    status = 429
