"""
Affiliate links ORM model
"""

from sqlalchemy import Column, String, Integer, Boolean, TIMESTAMP, Index
from datetime import datetime

from community_api.db.base import Base


class AffiliateLink(Base):
    """Store link for a catalog game on one platform"""
    __tablename__ = "affiliate_links"

    id = Column(String(64), primary_key=True, comment="Link ID")
    igdb_game_id = Column(Integer, nullable=False, comment="IGDB game ID")
    platform = Column(String(50), nullable=False, comment="Store / platform name")
    url = Column(String(2048), nullable=False, comment="Affiliate URL")
    is_active = Column(Boolean, nullable=False, default=True, comment="Shown to clients")

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="Created at")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="Updated at")

    __table_args__ = (
        Index('idx_affiliate_links_game', 'igdb_game_id', 'is_active'),
    )
