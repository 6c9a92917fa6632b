"""
Comments table ORM model
"""

from sqlalchemy import Column, String, Text, Integer, Boolean, TIMESTAMP, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from community_api.db.base import Base


class Comment(Base):
    """Game comments (replies reference their parent comment)"""
    __tablename__ = "comments"

    # Primary key
    id = Column(String(64), primary_key=True, comment="Comment ID")

    # Foreign keys
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="Author")
    igdb_game_id = Column(Integer, nullable=False, comment="IGDB game ID")
    parent_comment_id = Column(String(64), ForeignKey("comments.id"), nullable=True, comment="Parent comment ID (reply)")

    # Content
    content = Column(Text, nullable=False, comment="Comment content")
    is_edited = Column(Boolean, nullable=False, default=False, comment="Edited by the author")

    # Gamer metadata
    is_spoiler = Column(Boolean, nullable=False, default=False, comment="Contains spoilers")
    comment_type = Column(String(20), nullable=False, default="discussion", comment="Comment type")
    platform = Column(String(50), nullable=True, comment="Platform played on")
    difficulty_level = Column(String(20), nullable=True, comment="Difficulty played on")
    completion_status = Column(String(20), nullable=True, comment="Completion status")
    playtime_hours = Column(Integer, nullable=True, comment="Hours played")

    # Pin state
    is_pinned = Column(Boolean, nullable=False, default=False, comment="Pinned by the thread owner")
    pinned_at = Column(TIMESTAMP, nullable=True, comment="Pinned at")
    pinned_by_user_id = Column(String(64), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, comment="Pinned by")

    # Denormalized counters
    likes_count = Column(Integer, nullable=False, default=0, comment="Likes")
    dislikes_count = Column(Integer, nullable=False, default=0, comment="Dislikes")
    replies_count = Column(Integer, nullable=False, default=0, comment="Live replies")
    helpful_count = Column(Integer, nullable=False, default=0, comment="'helpful' reactions")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="Updated at")
    deleted_at = Column(TIMESTAMP, nullable=True, comment="Soft delete tombstone")

    user = relationship("User", back_populates="comments", foreign_keys=[user_id], lazy="joined")
    votes = relationship("CommentVote", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True)
    reactions = relationship("CommentReaction", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index('idx_comments_game', 'igdb_game_id', 'created_at'),
        Index('idx_comments_user', 'user_id', 'created_at'),
        Index('idx_comments_parent', 'parent_comment_id'),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
