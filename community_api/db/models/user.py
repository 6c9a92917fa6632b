"""
Users table ORM model
"""

from sqlalchemy import Column, String, TIMESTAMP, Index
from sqlalchemy.orm import relationship
from datetime import datetime

from community_api.db.base import Base


class User(Base):
    """Users table (bridged from Firebase)"""
    __tablename__ = "users"

    # Primary key
    id = Column(String(64), primary_key=True, comment="User ID")

    # Identity
    firebase_uid = Column(String(128), unique=True, nullable=False, comment="Firebase UID")
    email = Column(String(255), unique=True, nullable=False, comment="Email")

    # Profile
    display_name = Column(String(255), nullable=True, comment="Display name")
    photo_url = Column(String(1024), nullable=True, comment="Avatar URL")

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="Updated at")

    comments = relationship("Comment", back_populates="user", foreign_keys="Comment.user_id", passive_deletes=True)
    games = relationship("UserGame", back_populates="user", passive_deletes=True)

    __table_args__ = (
        Index('idx_users_firebase_uid', 'firebase_uid'),
        Index('idx_users_email', 'email'),
    )

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
