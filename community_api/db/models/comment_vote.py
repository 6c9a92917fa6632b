"""
Comment votes table ORM model
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from community_api.db.base import Base


class CommentVote(Base):
    """At most one like/dislike per (comment, user)"""
    __tablename__ = "comment_votes"

    id = Column(String(64), primary_key=True, comment="Vote ID")
    comment_id = Column(String(64), ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, comment="Comment ID")
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="Voter")
    vote_type = Column(String(10), nullable=False, comment="like / dislike")

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="Updated at")

    comment = relationship("Comment", back_populates="votes")

    __table_args__ = (
        UniqueConstraint('comment_id', 'user_id', name='uq_comment_votes_comment_user'),
        Index('idx_comment_votes_user', 'user_id'),
    )
