"""
ヘルスチェックエンドポイント

SerpAPI キーが未設定の場合、ホテル・レストランは常にフォールバックデータになるため
status=degraded を返します。
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from guide_services.config.settings import Settings, get_settings

router = APIRouter()

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """ヘルスチェックレスポンス"""

    status: str
    timestamp: datetime
    version: str = VERSION
    serp_api_configured: bool
    weather_timezone: str
    default_location: str


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """ヘルスチェック

    Returns:
        HealthResponse: ヘルスチェック結果（検索 API の設定状況を含む）
    """
    configured = bool(settings.serp_api_key)
    return HealthResponse(
        status="healthy" if configured else "degraded",
        timestamp=datetime.now(timezone.utc),
        serp_api_configured=configured,
        weather_timezone=settings.weather_timezone,
        default_location=settings.default_location,
    )


@router.get("/")
async def root() -> dict[str, str]:
    return {"name": "Guide Services API", "version": VERSION}
