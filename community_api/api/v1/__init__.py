"""
API v1 router
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .games import router as games_router
from .comments import router as comments_router
from .library import router as library_router

# v1 API router
api_router = APIRouter()

# Register sub-routers (grouped by prefix)
api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(library_router, prefix="/user/games", tags=["Library"])

# Comment routes span /games, /comments and /user
api_router.include_router(comments_router, tags=["Comments"])

api_router.include_router(games_router, prefix="/games", tags=["Games"])
