"""
Request identity

Optional-auth endpoints receive either Authenticated(user) or Anonymous()
and branch on the variant instead of checking for a missing user
"""

from dataclasses import dataclass
from typing import Optional, Union

from community_api.db.models.user import User


@dataclass(frozen=True)
class Authenticated:
    user: User

    @property
    def user_id(self) -> str:
        return self.user.id


@dataclass(frozen=True)
class Anonymous:
    pass


RequestIdentity = Union[Authenticated, Anonymous]


def identity_user_id(identity: RequestIdentity) -> Optional[str]:
    """Caller's user ID, None for anonymous requests"""
    if isinstance(identity, Authenticated):
        return identity.user_id
    return None
