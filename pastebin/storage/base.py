"""
Storage backend interface and helpers shared by every backend.
"""
import re
import time
from typing import Callable, List, Optional, Protocol

from pastebin.models import Paste

Clock = Callable[[], int]

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def sanitize_id(raw: str) -> str:
    """
    Strip every character outside [A-Za-z0-9_-].

    Never fails. The result may be empty, in which case callers must treat
    the lookup as not-found rather than use the empty key.
    """
    return _UNSAFE_ID_CHARS.sub("", raw)


class StorageBackend(Protocol):
    """Operations every paste backend provides."""

    async def get(self, paste_id: str) -> Optional[Paste]: ...
    async def set(self, paste: Paste) -> None: ...
    async def delete(self, paste_id: str) -> bool: ...
    async def list_all(self) -> List[Paste]: ...
    async def ping(self) -> bool: ...
    async def close(self) -> None: ...


def newest_first(pastes: List[Paste]) -> List[Paste]:
    return sorted(pastes, key=lambda paste: paste.created_at, reverse=True)
