"""
Unified response models
"""

from datetime import datetime
from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, Field


T = TypeVar('T')


def utc_timestamp() -> str:
    return datetime.utcnow().isoformat() + "Z"


class ResponseMeta(BaseModel):
    """Envelope metadata"""
    timestamp: str = Field(default_factory=utc_timestamp, description="Server time (ISO 8601)")


class ErrorMeta(ResponseMeta):
    path: str = Field(..., description="Request path")


class ApiResponse(BaseModel, Generic[T]):
    """Unified API success envelope"""
    success: bool = Field(True, description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Response payload")
    message: Optional[str] = Field(None, description="Human readable message")
    meta: ResponseMeta = Field(default_factory=ResponseMeta, description="Envelope metadata")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "data": {"key": "value"},
                "meta": {"timestamp": "2024-01-01T00:00:00Z"}
            }
        }


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Machine readable error code")
    message: str = Field(..., description="Error message")
    statusCode: int = Field(..., description="HTTP status")


class ErrorResponse(BaseModel):
    """Error envelope"""
    success: bool = Field(False, description="Always false")
    error: ErrorDetail
    meta: ErrorMeta

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "error": {
                    "code": "NOT_FOUND",
                    "message": "Comment not found",
                    "statusCode": 404
                },
                "meta": {
                    "timestamp": "2024-01-01T00:00:00Z",
                    "path": "/api/v1/comments/comment_01ARZ3NDEKTSV4RRFFQ69G5FAV"
                }
            }
        }
