"""
Database ORM models

Exports every SQLAlchemy model class
"""

from community_api.db.base import Base

# Import every model so Base knows all tables
from .user import User
from .comment import Comment
from .comment_vote import CommentVote
from .comment_reaction import CommentReaction
from .user_game import UserGame
from .affiliate_link import AffiliateLink

__all__ = [
    # Base
    "Base",

    # Models
    "User",
    "Comment",
    "CommentVote",
    "CommentReaction",
    "UserGame",
    "AffiliateLink",
]
