"""
Catalog service

Read-through cache in front of the IGDB client. Each endpoint has its own
key namespace and TTL; per-user flags are added after the cache lookup and
never stored.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.cache import Cache, RedisKeys, hash_params
from community_api.config.settings import settings
from community_api.db.dao import LibraryDAO
from community_api.endpoints.igdb import IgdbClient, igdb_client
from community_api.models import ApiResponse, CatalogEndpoint, Authenticated, RequestIdentity
from community_api.utils.exceptions import NotFoundError


class CatalogService:
    """Catalog service"""

    def __init__(self, client: IgdbClient = None, cache: Cache = None):
        self.client = client or igdb_client
        self.cache = cache or Cache()

    @staticmethod
    def cache_key(endpoint: CatalogEndpoint, **params) -> str:
        """Deterministic key from the endpoint name and its parameters"""
        return RedisKeys.catalog(endpoint.value, hash_params(params))

    async def _cached(
        self,
        endpoint: CatalogEndpoint,
        ttl: int,
        fetch: Callable[[], Awaitable[Any]],
        **params
    ) -> Any:
        key = self.cache_key(endpoint, **params)
        return await self.cache.get_or_set(key, fetch, ttl)

    # ==================== Cached lookups ====================

    async def search_games(self, query: str, limit: int = 10) -> List[dict]:
        return await self._cached(
            CatalogEndpoint.SEARCH,
            settings.CACHE_TTL_SEARCH_RESULTS,
            lambda: self.client.search_games(query, limit),
            q=query, limit=limit,
        )

    async def get_game_by_id(self, game_id: int) -> dict:
        """
        Game details

        Raises:
            NotFoundError: IGDB has no game with this ID
        """
        game = await self._cached(
            CatalogEndpoint.GAME,
            settings.CACHE_TTL_GAME_DETAILS,
            lambda: self.client.get_game_by_id(game_id),
            id=game_id,
        )
        if not game:
            raise NotFoundError(f"Game with ID {game_id} not found", code="GAME_NOT_FOUND")
        return game

    async def get_games_by_category(self, category: str, limit: int = 20, offset: int = 0) -> List[dict]:
        category = category.lower()
        return await self._cached(
            CatalogEndpoint.CATEGORY,
            settings.CACHE_TTL_LISTINGS,
            lambda: self.client.get_games_by_category(category, limit, offset),
            category=category, limit=limit, offset=offset,
        )

    async def get_trending_games(self, limit: int = 20) -> List[dict]:
        return await self._cached(
            CatalogEndpoint.TRENDING,
            settings.CACHE_TTL_LISTINGS,
            lambda: self.client.get_trending_games(limit),
            limit=limit,
        )

    async def get_popular_games(self, limit: int = 20) -> List[dict]:
        return await self._cached(
            CatalogEndpoint.POPULAR,
            settings.CACHE_TTL_LISTINGS,
            lambda: self.client.get_popular_games(limit),
            limit=limit,
        )

    # ==================== Personalized ====================

    async def get_game_detail(
        self,
        session: AsyncSession,
        game_id: int,
        identity: RequestIdentity
    ) -> ApiResponse:
        """
        Game details with the caller's library flags

        Args:
            session: database session
            game_id: IGDB game ID
            identity: Authenticated or Anonymous caller

        Returns:
            API response with the game; is_saved / is_played only for authenticated callers
        """
        game: Dict[str, Any] = dict(await self.get_game_by_id(game_id))

        if isinstance(identity, Authenticated):
            entry = await LibraryDAO.get(session, identity.user_id, game_id)
            game["is_saved"] = bool(entry and entry.is_saved)
            game["is_played"] = bool(entry and entry.is_played)
            logger.debug(f"Attached library flags of {identity.user_id} to game {game_id}")

        return ApiResponse(success=True, data=game)

    async def try_get_game(self, game_id: int) -> Optional[dict]:
        """Game details or None, for fan-out enrichment where one failure must not fail the batch"""
        try:
            return await self.get_game_by_id(game_id)
        except Exception as e:
            logger.warning(f"⚠️ Failed to fetch game {game_id} for enrichment: {e}")
            return None


# Global service instance
catalog_service = CatalogService()
