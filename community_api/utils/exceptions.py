"""
Service layer exceptions

Each exception carries the error code and HTTP status rendered in the
error envelope by the handlers registered in app.py
"""


class ServiceError(Exception):
    """Base class for expected business errors"""

    status_code = 500
    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, code: str = None, status_code: int = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def __str__(self):
        return self.message


class ValidationError(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(ServiceError):
    """Missing, invalid or expired credentials"""
    status_code = 401
    code = "UNAUTHORIZED"


class PermissionDeniedError(ServiceError):
    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ServiceError):
    status_code = 409
    code = "CONFLICT"


class UpstreamError(ServiceError):
    """The game catalog or token endpoint failed"""
    status_code = 502
    code = "UPSTREAM_ERROR"
