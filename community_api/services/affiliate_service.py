"""
Affiliate link service
"""

from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.dao import AffiliateDAO
from community_api.models import ApiResponse


class AffiliateService:
    """Affiliate link service"""

    @staticmethod
    async def get_game_links(session: AsyncSession, game_id: int) -> ApiResponse:
        """
        Active store links of a game

        Args:
            session: database session
            game_id: IGDB game ID

        Returns:
            API response with the links ordered by platform
        """
        links = await AffiliateDAO.get_active_links(session, game_id)

        return ApiResponse(
            success=True,
            data={
                "gameId": game_id,
                "links": [
                    {
                        "id": link.id,
                        "platform": link.platform,
                        "url": link.url,
                    }
                    for link in links
                ],
            }
        )


# Global service instance
affiliate_service = AffiliateService()
