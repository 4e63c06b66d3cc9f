"""
File-based JSON storage backend.
One file per paste, named after the sanitized id, inside a managed directory.
"""
import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from pastebin.exceptions import CorruptRecordError, TransientStorageError
from pastebin.models import Paste
from pastebin.storage.base import Clock, newest_first, now_ms, sanitize_id

logger = logging.getLogger(__name__)

EXTENSION = ".json"


class FileStore:
    """
    Writes each paste as a JSON file in a directory.

    Reads never raise: missing, unreadable and corrupt records all read as
    not-found. Writes raise TransientStorageError when the disk refuses them.
    """

    def __init__(self, directory: Union[str, Path], clock: Clock = now_ms):
        self.directory = Path(directory)
        self._clock = clock

    def _path_for(self, paste_id: str) -> Optional[Path]:
        safe_id = sanitize_id(paste_id)
        if not safe_id:
            return None
        return self.directory / f"{safe_id}{EXTENSION}"

    def _ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create data directory {self.directory}: {e}")

    def _remove(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not remove {path.name}: {e}")
            return False

    def _load(self, path: Path) -> Paste:
        """
        Read and parse one record.

        Raises:
            FileNotFoundError: If the file does not exist
            CorruptRecordError: If the file cannot be read or parsed
        """
        try:
            payload = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise CorruptRecordError(f"Unreadable record {path.name}: {e}") from e
        return Paste.from_json(payload)

    def _get(self, paste_id: str) -> Optional[Paste]:
        path = self._path_for(paste_id)
        if path is None:
            return None

        try:
            paste = self._load(path)
        except FileNotFoundError:
            return None
        except CorruptRecordError as e:
            logger.warning(f"Ignoring paste {paste_id}: {e}")
            return None

        if paste.is_expired(self._clock()):
            logger.info(f"Paste {paste_id} has expired, removing file")
            self._remove(path)
            return None

        return paste

    def _set(self, paste: Paste) -> None:
        path = self._path_for(paste.id)
        if path is None:
            raise TransientStorageError(f"Cannot derive a file name from paste id {paste.id!r}")

        self._ensure_directory()
        tmp_name = None
        try:
            # Write next to the target, then swap it in whole.
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(paste.to_json())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise TransientStorageError(f"Failed to write paste {paste.id}: {e}") from e

    def _delete(self, paste_id: str) -> bool:
        path = self._path_for(paste_id)
        if path is None:
            return False
        return self._remove(path)

    def _list_all(self) -> List[Paste]:
        self._ensure_directory()
        try:
            paths = sorted(self.directory.glob(f"*{EXTENSION}"))
        except OSError as e:
            logger.warning(f"Could not list data directory {self.directory}: {e}")
            return []

        now = self._clock()
        pastes = []
        for path in paths:
            try:
                paste = self._load(path)
            except (FileNotFoundError, CorruptRecordError):
                continue
            if paste.is_expired(now):
                self._remove(path)
                continue
            pastes.append(paste)
        return newest_first(pastes)

    def _ping(self) -> bool:
        self._ensure_directory()
        return self.directory.is_dir() and os.access(self.directory, os.W_OK)

    async def get(self, paste_id: str) -> Optional[Paste]:
        return await asyncio.to_thread(self._get, paste_id)

    async def set(self, paste: Paste) -> None:
        await asyncio.to_thread(self._set, paste)
        logger.info(f"Paste {paste.id} written to {self.directory}")

    async def delete(self, paste_id: str) -> bool:
        return await asyncio.to_thread(self._delete, paste_id)

    async def list_all(self) -> List[Paste]:
        return await asyncio.to_thread(self._list_all)

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._ping)

    async def close(self) -> None:
        pass
