"""
Data access object (DAO) layer

Wraps database operations for the service layer
"""

from .user_dao import UserDAO
from .comment_dao import CommentDAO
from .interaction_dao import InteractionDAO
from .library_dao import LibraryDAO
from .affiliate_dao import AffiliateDAO

__all__ = [
    "UserDAO",
    "CommentDAO",
    "InteractionDAO",
    "LibraryDAO",
    "AffiliateDAO",
]
