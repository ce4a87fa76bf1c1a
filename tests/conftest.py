"""Test configuration"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from guide_services.config.settings import Settings
from guide_services.database.connection import Base
# Import all models to ensure they are registered
from guide_services.models.cache import CacheEntry  # noqa: F401
from guide_services.services.cache_store import CacheStore


class FakeClock:
    """進め方を制御できる時計（秒）"""

    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
async def session_maker():
    """テスト用セッションメーカー"""
    # インメモリ SQLite
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def test_db(session_maker):
    """テスト用データベースセッション"""
    async with session_maker() as session:
        yield session


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_store(session_maker, clock):
    """時計を差し替えたキャッシュストア"""
    return CacheStore(session_maker, clock=clock)


@pytest.fixture
def test_settings(tmp_path):
    """テスト用設定（.env は読み込まない）"""
    return Settings(_env_file=None, serp_api_key="test_api_key", data_dir=tmp_path)
