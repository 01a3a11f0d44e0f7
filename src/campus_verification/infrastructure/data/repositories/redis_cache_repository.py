import json
import logging
import time
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ....domain.repositories.name_cache import DisplayNameCache


class RedisDisplayNameCache(DisplayNameCache):
    """Redis-backed display-name cache.

    Entries expire through Redis TTLs; a sorted-set index ordered by write time
    keeps the number of live entries at or below ``max_entries``. Cache faults
    are logged and treated as misses.
    """

    def __init__(self, redis_client: Redis, ttl_seconds: int = 300, max_entries: int = 1000,
                 prefix: str = "name:"):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.prefix = prefix
        self.index_key = f"{prefix}index"
        self.logger = logging.getLogger(__name__)

    def _key(self, email: str) -> str:
        return self.prefix + email.strip().lower()

    async def get(self, email: str) -> Optional[str]:
        try:
            cached_data = await self.redis.get(self._key(email))
            if cached_data is None:
                self.logger.debug(f"Name cache miss for {email}")
                return None

            data = json.loads(cached_data)
            self.logger.debug(f"Name cache hit for {email}")
            return data.get('name')

        except (RedisError, ValueError) as e:
            self.logger.error(f"Failed to read cached name for {email}: {e}")
            return None

    async def set(self, email: str, name: str) -> None:
        key = self._key(email)
        cache_data = {
            'name': name,
            'cached_at': time.time(),
            'ttl': self.ttl_seconds
        }

        try:
            await self.redis.setex(key, self.ttl_seconds, json.dumps(cache_data))
            await self.redis.zadd(self.index_key, {key: time.time()})
            await self._evict_overflow()
        except RedisError as e:
            self.logger.error(f"Failed to cache name for {email}: {e}")

    async def invalidate(self, email: str) -> None:
        key = self._key(email)
        try:
            await self.redis.delete(key)
            await self.redis.zrem(self.index_key, key)
        except RedisError as e:
            self.logger.error(f"Failed to invalidate cached name for {email}: {e}")

    async def _evict_overflow(self):
        size = await self.redis.zcard(self.index_key)
        overflow = size - self.max_entries
        if overflow <= 0:
            return

        evicted = await self.redis.zpopmin(self.index_key, overflow)
        keys = [member for member, _score in evicted]
        if keys:
            await self.redis.delete(*keys)
            self.logger.debug(f"Evicted {len(keys)} names from cache")

    async def health_check(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False
