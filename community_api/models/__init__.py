"""
Data models

Pydantic models for API request validation and response envelopes
"""

# Common responses
from .response import ApiResponse, ErrorResponse, ErrorDetail, ErrorMeta, ResponseMeta

# Comments
from .comment import (
    VoteType, ReactionType, CommentType, DifficultyLevel, CompletionStatus,
    VoteAction, CommentCreate, CommentUpdate, VoteRequest, ReactionRequest
)

# Auth
from .user import LoginRequest

# Library
from .library import AddGameRequest, GameStatusUpdate

# Catalog
from .game import CatalogEndpoint

# Request identity
from .identity import Authenticated, Anonymous, RequestIdentity, identity_user_id

__all__ = [
    # Response
    "ApiResponse",
    "ErrorResponse",
    "ErrorDetail",
    "ErrorMeta",
    "ResponseMeta",

    # Comment
    "VoteType",
    "ReactionType",
    "CommentType",
    "DifficultyLevel",
    "CompletionStatus",
    "VoteAction",
    "CommentCreate",
    "CommentUpdate",
    "VoteRequest",
    "ReactionRequest",

    # Auth
    "LoginRequest",

    # Library
    "AddGameRequest",
    "GameStatusUpdate",

    # Catalog
    "CatalogEndpoint",

    # Identity
    "Authenticated",
    "Anonymous",
    "RequestIdentity",
    "identity_user_id",
]
