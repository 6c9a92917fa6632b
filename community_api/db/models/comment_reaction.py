"""
Comment reactions table ORM model
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from community_api.db.base import Base


class CommentReaction(Base):
    """One row per (comment, user, reaction type); types do not exclude each other"""
    __tablename__ = "comment_reactions"

    id = Column(String(64), primary_key=True, comment="Reaction ID")
    comment_id = Column(String(64), ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, comment="Comment ID")
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="Reacting user")
    reaction_type = Column(String(20), nullable=False, comment="fire / hundred / pro_tip / helpful / funny / rip")

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")

    comment = relationship("Comment", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint('comment_id', 'user_id', 'reaction_type', name='uq_comment_reactions_triple'),
        Index('idx_comment_reactions_comment', 'comment_id', 'reaction_type'),
    )
