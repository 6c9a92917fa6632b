"""
API dependencies: authentication, database sessions
"""

from typing import Optional, AsyncIterator
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.base import get_db
from community_api.db.models.user import User
from community_api.models import Authenticated, Anonymous, RequestIdentity
from community_api.services.auth_service import auth_service
from community_api.utils.exceptions import AuthenticationError, ServiceError

# Bearer token (API access token or Firebase ID token)
security = HTTPBearer(auto_error=False, description="API access token or Firebase ID token")


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    Database session for one request

    Yields:
        AsyncSession: database session
    """
    async for session in get_db():
        yield session


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db_session)
) -> User:
    """
    Resolve the bearer token to the current user

    Raises:
        AuthenticationError: token missing, invalid or expired
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")

    return await auth_service.authenticate_bearer(session, credentials.credentials)


async def get_request_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_db_session)
) -> RequestIdentity:
    """
    Optional authentication

    Returns Anonymous() when no token is sent or the token cannot be
    resolved; public endpoints never fail because of a bad token
    """
    if not credentials or not credentials.credentials:
        return Anonymous()

    try:
        user = await auth_service.authenticate_bearer(session, credentials.credentials)
    except ServiceError as e:
        logger.debug(f"Optional auth failed, continuing anonymously: {e}")
        return Anonymous()

    return Authenticated(user)
