"""
ホテル・レストラン・天気 API エンドポイント

取得処理は常に成功し、劣化したデータの場合は degraded=true で返します。
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from guide_services.config.logging import get_logger
from guide_services.models.records import (
    FetchResult,
    HotelRecord,
    RestaurantRecord,
    WeatherSnapshot,
)
from guide_services.services.search_service import SearchService
from guide_services.services.weather_service import WeatherService

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Travel"])


def get_search_service(request: Request) -> SearchService:
    """起動時に生成した SearchService を取得"""
    return request.app.state.search_service


def get_weather_service(request: Request) -> WeatherService:
    """起動時に生成した WeatherService を取得"""
    return request.app.state.weather_service


@router.get("/hotels", response_model=FetchResult[list[HotelRecord]])
async def list_hotels(
    location: Optional[str] = Query(default=None, description="検索地域"),
    force_refresh: bool = Query(default=False, description="キャッシュを無視して再取得"),
    service: SearchService = Depends(get_search_service),
):
    """ホテル一覧を取得"""
    return await service.fetch_hotels(location, force_refresh=force_refresh)


@router.get("/restaurants", response_model=FetchResult[list[RestaurantRecord]])
async def list_restaurants(
    location: Optional[str] = Query(default=None, description="検索地域"),
    force_refresh: bool = Query(default=False, description="キャッシュを無視して再取得"),
    service: SearchService = Depends(get_search_service),
):
    """レストラン一覧を取得"""
    return await service.fetch_restaurants(location, force_refresh=force_refresh)


@router.delete("/search/cache", status_code=204)
async def clear_search_cache(service: SearchService = Depends(get_search_service)) -> None:
    """ホテル・レストランのキャッシュを削除"""
    await service.clear_search_cache()


@router.get("/weather", response_model=FetchResult[WeatherSnapshot])
async def get_weather(
    latitude: float = Query(ge=-90, le=90, description="緯度"),
    longitude: float = Query(ge=-180, le=180, description="経度"),
    place_name: str = Query(default="location", min_length=1, description="地点名"),
    service: WeatherService = Depends(get_weather_service),
):
    """地点の天気を取得"""
    return await service.fetch_weather(latitude, longitude, place_name)


@router.delete("/weather/cache", status_code=204)
async def clear_weather_cache(service: WeatherService = Depends(get_weather_service)) -> None:
    """天気キャッシュを削除"""
    await service.clear_weather_cache()
