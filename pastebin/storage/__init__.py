"""
Storage layer for pastes.

Exactly one backend is active per process, chosen in this order:
1. STORAGE_MODE, when it names "redis" (with REDIS_URL set), "file" or "memory"
2. Redis, when both REDIS_URL and REDIS_TOKEN are set
3. JSON files under DATA_DIR (durable without external services)
"""
import logging
from functools import lru_cache
from typing import List, Literal, Optional, get_args

from pastebin.config import Settings, settings
from pastebin.exceptions import InvalidPasteIdError
from pastebin.models import Paste
from pastebin.storage.base import StorageBackend, now_ms, sanitize_id
from pastebin.storage.file import FileStore
from pastebin.storage.memory import MemoryStore
from pastebin.storage.remote import RedisStore

logger = logging.getLogger(__name__)

StorageMode = Literal["redis", "file", "memory"]
STORAGE_MODES = get_args(StorageMode)

__all__ = [
    "FileStore",
    "MemoryStore",
    "PasteStorage",
    "RedisStore",
    "StorageBackend",
    "StorageMode",
    "create_storage",
    "get_storage",
    "now_ms",
    "sanitize_id",
    "select_mode",
]


def select_mode(config: Settings) -> StorageMode:
    """Pick the backend kind for this process from configuration alone."""
    if config.STORAGE_MODE:
        forced = config.STORAGE_MODE.lower()
        if forced == "redis" and not config.REDIS_URL:
            logger.error("STORAGE_MODE=redis requires REDIS_URL, falling back to detection")
        elif forced in STORAGE_MODES:
            return forced
        else:
            logger.warning(f"Ignoring unknown STORAGE_MODE {config.STORAGE_MODE!r}")

    if config.has_redis_credentials:
        return "redis"

    return "file"


class PasteStorage:
    """Uniform paste API over a single backend fixed at construction."""

    def __init__(self, backend: StorageBackend, mode: StorageMode):
        self._backend = backend
        self._mode = mode

    def current_mode(self) -> StorageMode:
        return self._mode

    async def get_paste(self, paste_id: str) -> Optional[Paste]:
        """
        Fetch a paste.

        Args:
            paste_id: Raw identifier, possibly taken from a URL

        Returns:
            The paste, or None if absent, expired or the id is unusable

        Raises:
            TransientStorageError: If the remote service fails
        """
        safe_id = sanitize_id(paste_id)
        if not safe_id:
            logger.debug(f"Rejected unusable paste id {paste_id!r}")
            return None
        return await self._backend.get(safe_id)

    async def save_paste(self, paste: Paste) -> None:
        """
        Store a paste, replacing any record with the same id.

        Raises:
            InvalidPasteIdError: If the id is not a sanitized identifier
            TransientStorageError: If the write could not be made durable
        """
        if not paste.id or sanitize_id(paste.id) != paste.id:
            raise InvalidPasteIdError(f"Unsafe paste id {paste.id!r}")
        await self._backend.set(paste)

    async def delete_paste(self, paste_id: str) -> bool:
        """Returns True iff a record existed and was removed."""
        safe_id = sanitize_id(paste_id)
        if not safe_id:
            return False
        deleted = await self._backend.delete(safe_id)
        if deleted:
            logger.info(f"Paste {safe_id} deleted")
        return deleted

    async def list_pastes(self) -> List[Paste]:
        """Live pastes, newest first. Always empty for Redis."""
        return await self._backend.list_all()

    async def ping(self) -> bool:
        return await self._backend.ping()

    async def close(self) -> None:
        await self._backend.close()


def create_storage(config: Settings) -> PasteStorage:
    """Build the storage facade and its one backend."""
    mode = select_mode(config)
    if mode == "redis":
        backend = RedisStore.from_url(config.REDIS_URL, config.REDIS_TOKEN)
    elif mode == "file":
        backend = FileStore(config.DATA_DIR)
    else:
        backend = MemoryStore()
        logger.warning("Using in-memory storage. Data will NOT persist across restarts.")

    logger.info(f"Storage mode: {mode}")
    return PasteStorage(backend, mode)


@lru_cache(maxsize=None)
def get_storage() -> PasteStorage:
    """Process-wide storage instance, built on first use."""
    return create_storage(settings)
