"""
CacheStore のユニットテスト
"""

import asyncio
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from guide_services.database.connection import Base
from guide_services.models.cache import CacheEntry
from guide_services.services.cache_store import CacheStore

TTL = timedelta(minutes=30)


@pytest.mark.asyncio
async def test_get_missing_key(cache_store):
    """存在しないキーは None"""
    assert await cache_store.get("nothing_here", TTL) is None


@pytest.mark.asyncio
async def test_set_then_get(cache_store):
    """保存した値を取得できる"""
    payload = {"items": [{"id": "h1", "price": 1234}], "location": "Kandy"}
    await cache_store.set("cached_google_hotels", payload)

    assert await cache_store.get("cached_google_hotels", TTL) == payload


@pytest.mark.asyncio
async def test_entry_expires_at_ttl(cache_store, clock):
    """有効期間ちょうどで期限切れになる"""
    await cache_store.set("weather_cache_Ella", {"current": {}})

    clock.advance(TTL.total_seconds() - 1)
    assert await cache_store.get("weather_cache_Ella", TTL) is not None

    clock.advance(1)
    assert await cache_store.get("weather_cache_Ella", TTL) is None


@pytest.mark.asyncio
async def test_set_overwrites_and_refreshes_timestamp(cache_store, clock, test_db):
    """上書きで値とタイムスタンプが更新される"""
    await cache_store.set("key", {"v": 1})
    clock.advance(60)
    await cache_store.set("key", {"v": 2})

    result = await test_db.execute(select(CacheEntry).where(CacheEntry.cache_key == "key"))
    entries = result.scalars().all()
    assert len(entries) == 1
    assert entries[0].to_envelope() == {"data": {"v": 2}, "timestamp": cache_store.now_ms()}


@pytest.mark.asyncio
async def test_clear_removes_only_matching_prefix(cache_store):
    """プレフィックスに一致するキーだけを削除"""
    await cache_store.set("weather_cache_Ella", {"a": 1})
    await cache_store.set("weather_cache_Sigiriya_Rock", {"a": 2})
    await cache_store.set("cached_google_hotels", {"a": 3})

    removed = await cache_store.clear("weather_cache_")

    assert removed == 2
    assert await cache_store.get("weather_cache_Ella", TTL) is None
    assert await cache_store.get("cached_google_hotels", TTL) == {"a": 3}


@pytest.mark.asyncio
async def test_clear_treats_underscore_literally(cache_store):
    """LIKE のワイルドカードをエスケープする"""
    await cache_store.set("weatherXcacheXElla", {"a": 1})

    removed = await cache_store.clear("weather_cache_")

    assert removed == 0
    assert await cache_store.get("weatherXcacheXElla", TTL) == {"a": 1}


@pytest.mark.asyncio
async def test_delete_keys(cache_store):
    """指定キーの削除"""
    await cache_store.set("cached_google_hotels", [1])
    await cache_store.set("cached_google_restaurants", [2])
    await cache_store.set("weather_cache_Galle", [3])

    await cache_store.delete("cached_google_hotels", "cached_google_restaurants")

    assert await cache_store.get("cached_google_hotels", TTL) is None
    assert await cache_store.get("cached_google_restaurants", TTL) is None
    assert await cache_store.get("weather_cache_Galle", TTL) == [3]


def _broken_session_maker():
    return MagicMock(side_effect=OperationalError("SELECT 1", {}, Exception("disk I/O error")))


@pytest.mark.asyncio
async def test_read_error_is_treated_as_miss():
    """読み込みエラーはキャッシュミスとして扱う"""
    store = CacheStore(_broken_session_maker())
    assert await store.get("key", TTL) is None


@pytest.mark.asyncio
async def test_write_and_clear_errors_are_swallowed():
    """書き込み・削除エラーは伝播しない"""
    store = CacheStore(_broken_session_maker())

    await store.set("key", {"v": 1})
    await store.delete("key")
    assert await store.clear("weather_cache_") == 0


@pytest.fixture
async def file_session_maker(tmp_path):
    """ファイルベース SQLite（接続ごとに独立したトランザクション）"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.mark.asyncio
async def test_concurrent_set_on_new_key_last_write_wins(file_session_maker, clock):
    """未作成のキーへの同時書き込みでも後勝ちで 1 行だけ残る"""
    store = CacheStore(file_session_maker, clock=clock)

    await asyncio.gather(store.set("k", {"v": 1}), store.set("k", {"v": 2}))

    assert await store.get("k", TTL) == {"v": 2}
    async with file_session_maker() as session:
        result = await session.execute(select(CacheEntry).where(CacheEntry.cache_key == "k"))
        assert len(result.scalars().all()) == 1
