"""
Affiliate link data access object
"""

from typing import List
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.models.affiliate_link import AffiliateLink
from community_api.utils.id_generator import generate_affiliate_link_id


class AffiliateDAO:
    """Affiliate link DAO"""

    @staticmethod
    async def get_active_links(session: AsyncSession, igdb_game_id: int) -> List[AffiliateLink]:
        """Active links of a game ordered by platform"""
        result = await session.execute(
            select(AffiliateLink)
            .where(
                and_(
                    AffiliateLink.igdb_game_id == igdb_game_id,
                    AffiliateLink.is_active.is_(True)
                )
            )
            .order_by(AffiliateLink.platform.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def create(
        session: AsyncSession,
        igdb_game_id: int,
        platform: str,
        url: str,
        is_active: bool = True
    ) -> AffiliateLink:
        """Register a link (reference data is seeded by operators)"""
        link = AffiliateLink(
            id=generate_affiliate_link_id(),
            igdb_game_id=igdb_game_id,
            platform=platform,
            url=url,
            is_active=is_active,
        )
        session.add(link)
        await session.flush()
        return link
