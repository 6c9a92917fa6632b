"""
Auth request models
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Exchange a Firebase ID token for an API access token"""
    firebaseToken: str = Field(..., min_length=1, description="Firebase ID token")

    class Config:
        extra = "forbid"
