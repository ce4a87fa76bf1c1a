"""
キャッシュ関連モデル

CacheEntry
"""

import uuid
from typing import Any

from sqlalchemy import JSON, BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from guide_services.database.connection import Base


class CacheEntry(Base):
    """外部 API レスポンスのキャッシュ"""

    __tablename__ = "cache_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    cache_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True, unique=True)
    payload: Mapped[Any] = mapped_column(JSON, nullable=False)
    # 保存時刻（エポックミリ秒）
    stored_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def to_envelope(self) -> dict[str, Any]:
        """永続化形式 {data, timestamp} に変換"""
        return {"data": self.payload, "timestamp": self.stored_at}

    def __repr__(self) -> str:
        return f"<CacheEntry(key={self.cache_key}, stored_at={self.stored_at})>"
