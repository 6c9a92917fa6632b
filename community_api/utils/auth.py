"""
Authentication helpers

Issuing and decoding the API's own JWT access tokens
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt

from community_api.config.settings import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: claims to encode (sub, userId, email, firebaseUid)
        expires_delta: lifetime override

    Returns:
        Encoded JWT string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    return encoded_jwt


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode a JWT access token

    Args:
        token: encoded JWT

    Returns:
        Claims dict, or None when the token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None


def build_token_claims(user) -> Dict[str, Any]:
    """Claims embedded in an access token for a local user"""
    return {
        "sub": user.id,
        "userId": user.id,
        "email": user.email,
        "firebaseUid": user.firebase_uid,
    }
