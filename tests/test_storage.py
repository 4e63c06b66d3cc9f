from __future__ import annotations

from pathlib import Path

import pytest

from pastebin.config import Settings
from pastebin.exceptions import InvalidPasteIdError
from pastebin.storage import (
    FileStore,
    MemoryStore,
    PasteStorage,
    RedisStore,
    create_storage,
    select_mode,
)
from tests.fakes import MINUTE_MS, START_MS, FakeClock, FakeRedis, make_paste

ENV_VARS = ("STORAGE_MODE", "REDIS_URL", "REDIS_TOKEN", "DATA_DIR")


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_to_file(env: pytest.MonkeyPatch) -> None:
    assert select_mode(Settings()) == "file"


def test_redis_needs_both_credentials(env: pytest.MonkeyPatch) -> None:
    env.setenv("REDIS_URL", "rediss://example.upstash.io:6379")
    assert select_mode(Settings()) == "file"

    env.setenv("REDIS_TOKEN", "secret")
    assert select_mode(Settings()) == "redis"


@pytest.mark.parametrize("mode", ["redis", "file", "memory", "MEMORY"])
def test_override_wins_over_credentials(env: pytest.MonkeyPatch, mode: str) -> None:
    env.setenv("REDIS_URL", "redis://localhost:6379")
    env.setenv("REDIS_TOKEN", "secret")
    env.setenv("STORAGE_MODE", mode)
    assert select_mode(Settings()) == mode.lower()


def test_unknown_override_is_ignored(env: pytest.MonkeyPatch) -> None:
    env.setenv("STORAGE_MODE", "postgres")
    assert select_mode(Settings()) == "file"


def test_create_storage_builds_matching_backend(env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env.setenv("DATA_DIR", str(tmp_path))
    storage = create_storage(Settings())
    assert storage.current_mode() == "file"
    assert isinstance(storage._backend, FileStore)
    assert storage._backend.directory == tmp_path

    env.setenv("STORAGE_MODE", "memory")
    assert isinstance(create_storage(Settings())._backend, MemoryStore)

    env.setenv("STORAGE_MODE", "redis")
    env.setenv("REDIS_URL", "redis://localhost:6379")
    storage = create_storage(Settings())
    assert storage.current_mode() == "redis"
    assert isinstance(storage._backend, RedisStore)


def test_forced_redis_without_url_falls_back(env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    env.setenv("STORAGE_MODE", "redis")
    env.setenv("REDIS_TOKEN", "secret")
    env.setenv("DATA_DIR", str(tmp_path))

    storage = create_storage(Settings())
    assert storage.current_mode() == "file"
    assert isinstance(storage._backend, FileStore)


@pytest.fixture(params=["memory", "file", "redis"])
def storage(request: pytest.FixtureRequest, tmp_path: Path, clock: FakeClock) -> PasteStorage:
    if request.param == "memory":
        backend = MemoryStore(clock=clock)
    elif request.param == "file":
        backend = FileStore(tmp_path / "pastes", clock=clock)
    else:
        backend = RedisStore(FakeRedis(clock), clock=clock)
    return PasteStorage(backend, request.param)


@pytest.mark.asyncio
async def test_save_then_get_returns_equal_record(storage: PasteStorage) -> None:
    paste = make_paste(expires_at=START_MS + MINUTE_MS)
    await storage.save_paste(paste)
    assert await storage.get_paste(paste.id) == paste


@pytest.mark.asyncio
async def test_visible_until_expiry_then_gone(storage: PasteStorage, clock: FakeClock) -> None:
    await storage.save_paste(make_paste(expires_at=START_MS + 10 * MINUTE_MS))

    clock.advance(10 * MINUTE_MS - 1)
    assert await storage.get_paste("abc123") is not None

    clock.advance(1)
    assert await storage.get_paste("abc123") is None
    assert await storage.list_pastes() == []


@pytest.mark.asyncio
async def test_never_expiring_paste_survives(storage: PasteStorage, clock: FakeClock) -> None:
    await storage.save_paste(make_paste())
    clock.advance(10 * 365 * 24 * 60 * MINUTE_MS)
    assert await storage.get_paste("abc123") is not None


@pytest.mark.asyncio
async def test_delete_twice(storage: PasteStorage) -> None:
    await storage.save_paste(make_paste())
    assert await storage.delete_paste("abc123") is True
    assert await storage.delete_paste("abc123") is False


@pytest.mark.asyncio
async def test_unusable_ids_are_not_found(storage: PasteStorage) -> None:
    assert await storage.get_paste("../../etc/passwd") is None
    assert await storage.get_paste("/../") is None
    assert await storage.delete_paste("\x00") is False


@pytest.mark.asyncio
async def test_raw_ids_are_sanitized_before_lookup(storage: PasteStorage) -> None:
    await storage.save_paste(make_paste("abc123"))
    paste = await storage.get_paste("abc/123")
    assert paste is not None
    assert paste.id == "abc123"


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["", "../x", "a b", "id.json"])
async def test_save_rejects_unsafe_ids(storage: PasteStorage, bad_id: str) -> None:
    with pytest.raises(InvalidPasteIdError):
        await storage.save_paste(make_paste(bad_id))


@pytest.mark.asyncio
async def test_listing_newest_first(storage: PasteStorage) -> None:
    await storage.save_paste(make_paste("older", created_at=1000))
    await storage.save_paste(make_paste("newer", created_at=2000))

    listed = [p.id for p in await storage.list_pastes()]
    if storage.current_mode() == "redis":
        assert listed == []
    else:
        assert listed == ["newer", "older"]
