"""
Redis storage backend.
Expiry is delegated to Redis key TTLs; records are stored as JSON strings.
"""
import logging
import math
from typing import List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from pastebin.exceptions import CorruptRecordError, TransientStorageError
from pastebin.models import Paste
from pastebin.storage.base import Clock, now_ms

logger = logging.getLogger(__name__)

KEY_PREFIX = "paste"


def paste_key(paste_id: str) -> str:
    return f"{KEY_PREFIX}:{paste_id}"


def ttl_seconds(expires_at: int, now: int) -> int:
    """Remaining lifetime in whole seconds, rounded up."""
    return math.ceil((expires_at - now) / 1000)


class RedisStore:
    """Wrapper for Redis operations on pastes."""

    def __init__(self, client: Redis, clock: Clock = now_ms):
        self.redis = client
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, token: Optional[str] = None, clock: Clock = now_ms) -> "RedisStore":
        """
        Build a store from connection settings.

        Args:
            url: redis:// or rediss:// URL (use rediss:// for TLS providers such as Upstash)
            token: Password/token sent with AUTH. A password embedded in the URL
                takes precedence, so leave it out of the URL when a token is used
            clock: Millisecond clock used for TTL computation

        Returns:
            RedisStore using a lazily connecting client
        """
        logger.info(f"Using Redis at {url[:30]}...")
        client = Redis.from_url(url, password=token, decode_responses=True)
        return cls(client, clock=clock)

    async def get(self, paste_id: str) -> Optional[Paste]:
        key = paste_key(paste_id)
        try:
            payload = await self.redis.get(key)
        except RedisError as e:
            logger.error(f"Error fetching paste {paste_id}: {e}")
            raise TransientStorageError(f"Redis GET failed for {key}: {e}") from e

        if payload is None:
            logger.debug(f"Paste {paste_id} not found")
            return None

        try:
            paste = Paste.from_json(payload)
        except CorruptRecordError as e:
            logger.warning(f"Ignoring paste {paste_id}: {e}")
            return None

        # Key TTLs are whole seconds, so the key can outlive expiresAt slightly.
        if paste.is_expired(self._clock()):
            logger.info(f"Paste {paste_id} has expired, removing key")
            try:
                await self.redis.delete(key)
            except RedisError as e:
                logger.warning(f"Could not remove expired paste {paste_id}: {e}")
            return None

        return paste

    async def set(self, paste: Paste) -> None:
        key = paste_key(paste.id)
        try:
            if paste.expires_at is None:
                await self.redis.set(key, paste.to_json())
            else:
                ttl = ttl_seconds(paste.expires_at, self._clock())
                if ttl > 0:
                    await self.redis.set(key, paste.to_json(), ex=ttl)
                else:
                    # Already expired: the id must read as absent, so drop any
                    # previous value instead of writing one without a TTL.
                    logger.info(f"Paste {paste.id} expired before it was written, skipping")
                    await self.redis.delete(key)
                    return
        except RedisError as e:
            logger.error(f"Error saving paste {paste.id}: {e}")
            raise TransientStorageError(f"Redis SET failed for {key}: {e}") from e

        logger.info(f"Paste {paste.id} saved to Redis")

    async def delete(self, paste_id: str) -> bool:
        key = paste_key(paste_id)
        try:
            removed = await self.redis.delete(key)
        except RedisError as e:
            logger.error(f"Error deleting paste {paste_id}: {e}")
            raise TransientStorageError(f"Redis DEL failed for {key}: {e}") from e
        return removed > 0

    async def list_all(self) -> List[Paste]:
        # Redis keys are not enumerated at this layer.
        return []

    async def ping(self) -> bool:
        try:
            await self.redis.ping()
            return True
        except RedisError as e:
            logger.error(f"Health check failed: {e}")
        return False

    async def close(self) -> None:
        await self.redis.aclose()
