"""
In-memory storage backend. Data lives as long as the owning process.
"""
import logging
from typing import Dict, List, Optional

from pastebin.models import Paste
from pastebin.storage.base import Clock, newest_first, now_ms

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Simple in-memory store, owned by whoever constructs it.

    The application builds one at startup and keeps it for the life of the
    process; tests build a fresh one per case.
    """

    def __init__(self, clock: Clock = now_ms):
        self._pastes: Dict[str, Paste] = {}
        self._clock = clock

    async def get(self, paste_id: str) -> Optional[Paste]:
        paste = self._pastes.get(paste_id)
        if paste is None:
            return None

        if paste.is_expired(self._clock()):
            self._pastes.pop(paste_id, None)
            logger.info(f"Paste {paste_id} has expired, evicted from memory")
            return None

        return paste

    async def set(self, paste: Paste) -> None:
        self._pastes[paste.id] = paste

    async def delete(self, paste_id: str) -> bool:
        return self._pastes.pop(paste_id, None) is not None

    async def list_all(self) -> List[Paste]:
        now = self._clock()
        return newest_first([p for p in self._pastes.values() if not p.is_expired(now)])

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass
