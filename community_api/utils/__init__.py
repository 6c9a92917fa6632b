"""
Utility module
"""

from .auth import create_access_token, decode_access_token
from .exceptions import (
    ServiceError, ValidationError, AuthenticationError,
    PermissionDeniedError, NotFoundError, ConflictError, UpstreamError
)

__all__ = [
    "create_access_token",
    "decode_access_token",
    "ServiceError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "UpstreamError",
]
