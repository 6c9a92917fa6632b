"""
Firebase ID token verification
"""

from dataclasses import dataclass
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from loguru import logger

from community_api.config.settings import settings
from community_api.utils.exceptions import AuthenticationError


@dataclass
class FirebaseIdentity:
    """Verified claims of a Firebase ID token"""
    uid: str
    email: Optional[str]
    name: Optional[str] = None
    picture: Optional[str] = None


class FirebaseVerifier:
    """Verifies Firebase ID tokens against Google's public certificates"""

    def __init__(self, project_id: str = None):
        self._project_id = project_id

    @property
    def project_id(self) -> str:
        return self._project_id or settings.FIREBASE_PROJECT_ID

    def _verify_sync(self, token: str) -> dict:
        return id_token.verify_firebase_token(
            token, google_requests.Request(), audience=self.project_id
        )

    async def verify(self, token: str) -> FirebaseIdentity:
        """
        Verify a Firebase ID token

        Args:
            token: raw ID token sent by the mobile client

        Returns:
            FirebaseIdentity

        Raises:
            AuthenticationError: the token is malformed, expired or issued for another project
        """
        if not self.project_id:
            logger.error("❌ FIREBASE_PROJECT_ID is not configured")
            raise AuthenticationError("Identity provider is not configured")

        try:
            claims = await run_in_threadpool(self._verify_sync, token)
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            logger.warning(f"⚠️ Firebase token validation failed: {e}")
            raise AuthenticationError("Invalid Firebase token") from e

        if not claims or not claims.get("sub"):
            raise AuthenticationError("Invalid Firebase token")

        return FirebaseIdentity(
            uid=claims.get("user_id") or claims["sub"],
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
        )


# Global verifier instance
firebase_verifier = FirebaseVerifier()
