"""
Auth routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models import ApiResponse, LoginRequest
from community_api.api.deps import get_current_user, get_db_session
from community_api.db.models.user import User
from community_api.services.auth_service import auth_service

router = APIRouter()


@router.post("/login", response_model=ApiResponse)
async def login(
    data: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    """
    Log in with a Firebase ID token

    - creates the local user on first login
    - returns an API access token
    """
    return await auth_service.login(session, data.firebaseToken)


@router.get("/me", response_model=ApiResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user profile"""
    return await auth_service.get_profile(current_user)
