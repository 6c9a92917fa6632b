"""
Fixed window rate limiting

Counters live in Redis (INCR + EXPIRE); when Redis is unavailable the
process-local window is used instead
"""

import time
from typing import Dict, Optional, Tuple

from loguru import logger

from community_api.cache import RedisKeys, get_redis_client
from community_api.config.settings import settings


class FixedWindowRateLimiter:
    """N requests per window per client"""

    def __init__(self, max_requests: int = None, window_seconds: int = None):
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._local: Dict[str, Tuple[int, int]] = {}

    @property
    def max_requests(self) -> int:
        return self._max_requests or settings.RATE_LIMIT_MAX_REQUESTS

    @property
    def window_seconds(self) -> int:
        return self._window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS

    async def _incr_redis(self, key: str) -> Optional[int]:
        redis_client = get_redis_client()
        if redis_client is None:
            return None

        try:
            count = await redis_client.incr(key)
            if int(count) == 1:
                await redis_client.expire(key, self.window_seconds)
            return int(count)
        except Exception as e:
            logger.warning(f"⚠️ Rate limit counter unavailable, using local window: {e}")
            return None

    def _incr_local(self, client_id: str, window: int) -> int:
        if len(self._local) > 10000:
            self._local = {k: v for k, v in self._local.items() if v[0] == window}

        current_window, count = self._local.get(client_id, (window, 0))
        if current_window != window:
            count = 0
        count += 1
        self._local[client_id] = (window, count)
        return count

    async def hit(self, client_id: str) -> Tuple[bool, int]:
        """
        Count one request

        Args:
            client_id: client key, usually the remote IP

        Returns:
            (allowed, retry_after_seconds)
        """
        now = int(time.time())
        window = now // self.window_seconds
        retry_after = self.window_seconds - (now % self.window_seconds)

        count = await self._incr_redis(RedisKeys.rate_limit(client_id, window))
        if count is None:
            count = self._incr_local(client_id, window)

        return count <= self.max_requests, retry_after

    def reset(self):
        self._local.clear()


# Global limiter instance
rate_limiter = FixedWindowRateLimiter()
