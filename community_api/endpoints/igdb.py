"""
IGDB catalog client

Apicalypse queries posted to the IGDB v4 API, authenticated with a Twitch
app access token that is itself cached in Redis
"""

import time
from typing import Optional, List, Dict, Any, Tuple

import aiohttp
from loguru import logger

from community_api.cache import Cache, RedisKeys
from community_api.config.settings import settings
from community_api.utils.exceptions import UpstreamError

LIST_FIELDS = (
    "id, name, summary, cover.url, cover.image_id, "
    "first_release_date, rating, rating_count, "
    "genres.name, platforms.name"
)

SEARCH_FIELDS = LIST_FIELDS + ", platforms.abbreviation"

DETAIL_FIELDS = (
    "id, name, summary, storyline, "
    "cover.url, cover.image_id, "
    "artworks.url, artworks.image_id, "
    "screenshots.url, screenshots.image_id, "
    "genres.name, "
    "platforms.name, platforms.abbreviation, "
    "release_dates.date, release_dates.human, release_dates.platform.name, "
    "involved_companies.company.name, involved_companies.developer, involved_companies.publisher, "
    "rating, rating_count, "
    "aggregated_rating, aggregated_rating_count, "
    "game_modes.name, themes.name, "
    "first_release_date, url"
)

# Unix timestamp of 2022-01-01
TRENDING_CATEGORY_SINCE = 1640995200

GENRE_IDS = {
    "action": 4,
    "adventure": 31,
    "rpg": 12,
    "strategy": 15,
    "sports": 14,
}


def category_where_clause(category: str) -> str:
    """Apicalypse where clause for a category listing"""
    category = category.lower()
    if category in ("popular", "most-popular"):
        return "rating_count > 100"
    if category == "trending":
        return f"first_release_date > {TRENDING_CATEGORY_SINCE}"
    if category in GENRE_IDS:
        return f"genres = ({GENRE_IDS[category]})"
    return "rating_count > 50"


def escape_search_term(query: str) -> str:
    return query.replace("\\", "\\\\").replace('"', '\\"')


class IgdbClient:

    def __init__(self, base_url: str = None, client_id: str = None,
                 client_secret: str = None, cache: Cache = None):
        self._base_url = base_url
        self._client_id = client_id
        self._client_secret = client_secret
        self.cache = cache or Cache()
        # (token, expires_at) kept in process for when Redis is unavailable
        self._local_token: Optional[Tuple[str, float]] = None

    @property
    def base_url(self) -> str:
        return (self._base_url or settings.IGDB_API_URL).rstrip("/")

    @property
    def client_id(self) -> str:
        return self._client_id or settings.TWITCH_CLIENT_ID

    @property
    def client_secret(self) -> str:
        return self._client_secret or settings.TWITCH_CLIENT_SECRET

    def headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Client-ID": self.client_id,
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "text/plain",
            "Accept": "application/json",
        }

    # ==================== Twitch app token ====================

    async def get_access_token(self) -> str:
        """
        Cached Twitch app access token, fetched on first use

        Redis is checked first, then the in-process copy
        """
        cached_token = await self.cache.get(RedisKeys.igdb_access_token())
        if cached_token:
            logger.debug("Using cached IGDB access token")
            return cached_token

        if self._local_token and self._local_token[1] > time.time():
            logger.debug("Using in-process IGDB access token")
            return self._local_token[0]

        logger.info("🔑 Fetching new IGDB access token from Twitch")
        token, expires_in = await self._fetch_access_token()

        ttl = settings.IGDB_TOKEN_CACHE_TTL
        if expires_in:
            ttl = min(ttl, int(expires_in))
        await self.cache.set(RedisKeys.igdb_access_token(), token, ttl)
        self._local_token = (token, time.time() + ttl)

        return token

    async def refresh_access_token(self) -> str:
        """Drop the cached token and fetch a new one"""
        await self.cache.delete(RedisKeys.igdb_access_token())
        self._local_token = None
        return await self.get_access_token()

    async def _fetch_access_token(self):
        if not self.client_id or not self.client_secret:
            raise UpstreamError(
                "IGDB credentials not configured. Set TWITCH_CLIENT_ID and TWITCH_CLIENT_SECRET"
            )

        params = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "client_credentials",
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    settings.TWITCH_TOKEN_URL,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=settings.IGDB_TIMEOUT)
                ) as response:
                    if response.status != 200:
                        text = await response.text()
                        logger.error(f"❌ Twitch token request failed {response.status}: {text}")
                        raise UpstreamError("Failed to authenticate with IGDB")
                    data = await response.json()
        except aiohttp.ClientError as e:
            logger.error(f"❌ Twitch token request failed: {e}")
            raise UpstreamError("Failed to authenticate with IGDB") from e

        logger.success(f"✅ IGDB access token obtained, expires in {data.get('expires_in')}s")
        return data["access_token"], data.get("expires_in")

    # ==================== Requests ====================

    async def post(self, endpoint: str, body: str, retry_on_unauthorized: bool = True) -> Any:
        """
        POST an Apicalypse query

        A 401 drops the cached token and retries exactly once

        Args:
            endpoint: API path, e.g. /games
            body: Apicalypse query text
            retry_on_unauthorized: whether a 401 may trigger a token refresh

        Returns:
            Decoded JSON response
        """
        access_token = await self.get_access_token()

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    f"{self.base_url}{endpoint}",
                    data=body,
                    headers=self.headers(access_token),
                    timeout=aiohttp.ClientTimeout(total=settings.IGDB_TIMEOUT)
                ) as response:
                    if response.status == 200:
                        return await response.json()

                    text = await response.text()
                    status = response.status
        except aiohttp.ClientError as e:
            logger.error(f"❌ IGDB request to {endpoint} failed: {e}")
            raise UpstreamError("Game catalog is unavailable") from e

        if status == 401 and retry_on_unauthorized:
            logger.warning("⚠️ IGDB token rejected, refreshing...")
            await self.refresh_access_token()
            return await self.post(endpoint, body, retry_on_unauthorized=False)

        logger.error(f"❌ IGDB API error {status}: {text}")
        raise UpstreamError(f"Game catalog request failed with status {status}")

    # ==================== Catalog queries ====================

    async def search_games(self, query: str, limit: int = 10) -> List[dict]:
        body = (
            f'search "{escape_search_term(query)}";\n'
            f"fields {SEARCH_FIELDS};\n"
            f"limit {limit};"
        )
        logger.debug(f"Searching games with query: {query}")
        return await self.post("/games", body)

    async def get_game_by_id(self, game_id: int) -> Optional[dict]:
        body = (
            f"fields {DETAIL_FIELDS};\n"
            f"where id = {int(game_id)};"
        )
        logger.debug(f"Fetching game details for ID: {game_id}")
        results = await self.post("/games", body)
        return results[0] if results else None

    async def get_games_by_category(self, category: str, limit: int = 20, offset: int = 0) -> List[dict]:
        body = (
            f"fields {LIST_FIELDS};\n"
            f"where {category_where_clause(category)};\n"
            "sort rating_count desc;\n"
            f"limit {limit};\n"
            f"offset {offset};"
        )
        logger.debug(f"Fetching games for category: {category}")
        return await self.post("/games", body)

    async def get_trending_games(self, limit: int = 20) -> List[dict]:
        """Recent releases (last 90 days) sorted by rating"""
        now = int(time.time())
        since = now - 90 * 24 * 60 * 60
        body = (
            f"fields {LIST_FIELDS};\n"
            f"where first_release_date > {since} & first_release_date < {now} & rating_count > 10;\n"
            "sort rating desc;\n"
            f"limit {limit};"
        )
        logger.debug("Fetching trending games")
        return await self.post("/games", body)

    async def get_popular_games(self, limit: int = 20) -> List[dict]:
        body = (
            f"fields {LIST_FIELDS};\n"
            "where rating_count > 100;\n"
            "sort rating_count desc;\n"
            f"limit {limit};"
        )
        logger.debug("Fetching popular games")
        return await self.post("/games", body)


# Global client instance
igdb_client = IgdbClient()
