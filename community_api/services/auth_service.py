"""
Identity bridge

Verifies Firebase ID tokens, keeps the local users table in sync and
issues the API's own access tokens
"""

from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from community_api.db.dao import UserDAO
from community_api.db.models.user import User
from community_api.models import ApiResponse
from community_api.utils.auth import create_access_token, decode_access_token, build_token_claims
from community_api.utils.exceptions import AuthenticationError, ConflictError
from community_api.utils.firebase import FirebaseIdentity, firebase_verifier


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "displayName": user.display_name,
        "photoUrl": user.photo_url,
        "firebaseUid": user.firebase_uid,
    }


class AuthService:
    """Identity bridge service"""

    def __init__(self, verifier=None):
        self.verifier = verifier or firebase_verifier

    async def find_or_create_user(self, session: AsyncSession, identity: FirebaseIdentity) -> User:
        """
        Upsert the local user for a verified identity

        Lookup order: Firebase UID, then email (account re-linked in
        Firebase, the stored UID is replaced), then a new user.

        Args:
            session: database session
            identity: verified token claims

        Returns:
            User
        """
        user = await UserDAO.get_by_firebase_uid(session, identity.uid)
        if user:
            return user

        if not identity.email:
            raise AuthenticationError("Firebase account has no email address")

        user = await UserDAO.get_by_email(session, identity.email)
        if user:
            await UserDAO.update(session, user, firebase_uid=identity.uid)
            logger.info(f"🔗 Updated Firebase UID for user: {user.id}")
            return user

        user = await UserDAO.create(
            session,
            firebase_uid=identity.uid,
            email=identity.email,
            display_name=identity.name,
            photo_url=identity.picture,
        )
        if user is None:
            # A concurrent login created the row first
            user = await UserDAO.get_by_firebase_uid(session, identity.uid)
            if user is None:
                raise ConflictError("Email is already linked to another account")
            return user

        logger.info(f"👤 Created new user: {user.id} ({user.email})")
        return user

    async def verify_and_upsert(self, session: AsyncSession, external_token: str) -> User:
        """
        Verify a Firebase ID token and return the matching local user

        Raises:
            AuthenticationError: verification failed
        """
        identity = await self.verifier.verify(external_token)
        logger.debug(f"Firebase token verified for UID: {identity.uid}")
        return await self.find_or_create_user(session, identity)

    async def authenticate_bearer(self, session: AsyncSession, token: str) -> User:
        """
        Resolve a bearer token to a user

        The token is tried as an API access token first, then as a Firebase ID token

        Raises:
            AuthenticationError: neither interpretation yields a user
        """
        payload = decode_access_token(token)
        if payload is not None:
            user_id = payload.get("userId") or payload.get("sub")
            user = await UserDAO.get_by_id(session, user_id) if user_id else None
            if user is None:
                raise AuthenticationError("User not found")
            return user

        return await self.verify_and_upsert(session, token)

    async def login(self, session: AsyncSession, firebase_token: str) -> ApiResponse:
        """
        Exchange a Firebase ID token for an API access token

        Returns:
            API response with accessToken and the user summary
        """
        try:
            user = await self.verify_and_upsert(session, firebase_token)
        except AuthenticationError:
            logger.warning("⚠️ Login failed: invalid Firebase token")
            raise

        access_token = create_access_token(data=build_token_claims(user))
        logger.info(f"🔓 User {user.id} logged in")

        return ApiResponse(
            success=True,
            message="Login successful",
            data={
                "accessToken": access_token,
                "user": serialize_user(user),
            }
        )

    @staticmethod
    async def get_profile(user: User) -> ApiResponse:
        return ApiResponse(success=True, data=serialize_user(user))


# Global service instance
auth_service = AuthService()
