"""
期限付きキャッシュストア

cache_entries テーブルを使用した期限付き Key-Value キャッシュ。
書き込みはベストエフォートで、I/O エラーは呼び出し元に伝播しません。
"""

import time
import uuid
from datetime import timedelta
from typing import Any, Callable

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from guide_services.config.logging import get_logger
from guide_services.models.cache import CacheEntry
from guide_services.services.error_handler import CacheIOError, handle_error

logger = get_logger(__name__)


class CacheStore:
    """期限付きキャッシュ

    プロセス起動時に一度だけ生成し、各サービスへ明示的に渡す。
    同一キーへの同時書き込みは後勝ち。
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Callable[[], float] = time.time,
    ):
        self.session_maker = session_maker
        self._clock = clock

    def now_ms(self) -> int:
        """現在時刻（エポックミリ秒）"""
        return int(self._clock() * 1000)

    async def get(self, key: str, ttl: timedelta) -> Any | None:
        """キャッシュを取得

        Args:
            key: キャッシュキー
            ttl: 有効期間

        Returns:
            保存されたペイロード。存在しない、期限切れ、読み込み失敗の場合は None
        """
        try:
            async with self.session_maker() as session:
                stmt = select(CacheEntry).where(CacheEntry.cache_key == key)
                result = await session.execute(stmt)
                entry = result.scalar_one_or_none()
        except (SQLAlchemyError, ValueError) as e:
            handle_error(
                CacheIOError("Cache read failed", details={"key": key}, original_error=e),
                {"cache_key": key},
            )
            return None

        if entry is None:
            logger.debug(f"Cache miss: {key}", extra={"cache_key": key})
            return None

        envelope = entry.to_envelope()
        age_ms = self.now_ms() - envelope["timestamp"]
        if age_ms >= ttl.total_seconds() * 1000:
            logger.debug(f"Cache expired: {key} (age {age_ms}ms)", extra={"cache_key": key})
            return None

        logger.info(f"Returning cached {key}", extra={"cache_key": key})
        return envelope["data"]

    async def set(self, key: str, payload: Any) -> None:
        """キャッシュを保存（既存エントリは無条件に上書き）

        Args:
            key: キャッシュキー
            payload: JSON シリアライズ可能な値
        """
        stored_at = self.now_ms()
        try:
            # 単一の UPSERT 文で書き込む（同一キーへの同時書き込みでも後勝ち）
            stmt = sqlite_insert(CacheEntry).values(
                id=str(uuid.uuid4()),
                cache_key=key,
                payload=payload,
                stored_at=stored_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[CacheEntry.cache_key],
                set_={"payload": stmt.excluded.payload, "stored_at": stmt.excluded.stored_at},
            )
            async with self.session_maker() as session:
                await session.execute(stmt)
                await session.commit()
            logger.debug(f"Cached {key}", extra={"cache_key": key})
        except (SQLAlchemyError, TypeError, ValueError) as e:
            handle_error(
                CacheIOError("Cache write failed", details={"key": key}, original_error=e),
                {"cache_key": key},
            )

    async def delete(self, *keys: str) -> None:
        """指定したキーを削除"""
        if not keys:
            return
        try:
            async with self.session_maker() as session:
                await session.execute(delete(CacheEntry).where(CacheEntry.cache_key.in_(keys)))
                await session.commit()
            logger.info(f"Cache cleared: {', '.join(keys)}")
        except SQLAlchemyError as e:
            handle_error(
                CacheIOError("Cache delete failed", details={"keys": list(keys)}, original_error=e)
            )

    async def clear(self, prefix: str) -> int:
        """プレフィックスに一致するキーをすべて削除

        Args:
            prefix: キーのプレフィックス

        Returns:
            削除した件数（失敗時は 0）
        """
        try:
            async with self.session_maker() as session:
                stmt = delete(CacheEntry).where(
                    CacheEntry.cache_key.startswith(prefix, autoescape=True)
                )
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            handle_error(
                CacheIOError("Cache clear failed", details={"prefix": prefix}, original_error=e)
            )
            return 0

        removed = result.rowcount or 0
        logger.info(f"Cleared {removed} cache entries with prefix {prefix}")
        return removed
