"""
User game library ORM model
"""

from sqlalchemy import Column, String, Integer, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from community_api.db.base import Base


class UserGame(Base):
    """Library entry: one row per (user, IGDB game)"""
    __tablename__ = "user_games"

    id = Column(String(64), primary_key=True, comment="Entry ID")
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, comment="Owner")
    igdb_game_id = Column(Integer, nullable=False, comment="IGDB game ID")

    # Status flags
    is_saved = Column(Boolean, nullable=False, default=False, comment="In the user's library")
    is_played = Column(Boolean, nullable=False, default=False, comment="Marked as played")
    saved_at = Column(TIMESTAMP, nullable=True, comment="Saved at")
    played_at = Column(TIMESTAMP, nullable=True, comment="Marked played at")
    play_time_hours = Column(Integer, nullable=True, comment="Hours played")

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="Updated at")

    user = relationship("User", back_populates="games")

    __table_args__ = (
        UniqueConstraint('user_id', 'igdb_game_id', name='uq_user_games_user_game'),
        Index('idx_user_games_user_saved', 'user_id', 'is_saved'),
    )
