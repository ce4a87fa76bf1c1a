"""Integration tests for travel API endpoints"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from guide_services.api.travel import get_search_service, get_weather_service
from guide_services.config.settings import Settings, get_settings
from guide_services.main import app
from guide_services.models.records import FetchResult, HotelRecord, RestaurantRecord, WeatherSnapshot
from guide_services.services.fallbacks import (
    get_fallback_hotels,
    get_fallback_restaurants,
    get_fallback_weather,
)


@pytest.fixture
def search_service():
    service = MagicMock()
    service.fetch_hotels = AsyncMock(
        return_value=FetchResult[list[HotelRecord]].from_fallback(get_fallback_hotels())
    )
    service.fetch_restaurants = AsyncMock(
        return_value=FetchResult[list[RestaurantRecord]].from_network(get_fallback_restaurants())
    )
    service.clear_search_cache = AsyncMock()
    return service


@pytest.fixture
def weather_service():
    service = MagicMock()
    service.fetch_weather = AsyncMock(
        return_value=FetchResult[WeatherSnapshot].from_cache(get_fallback_weather())
    )
    service.clear_weather_cache = AsyncMock()
    return service


@pytest.fixture
async def client(search_service, weather_service):
    """サービスを差し替えたテストクライアント"""
    app.dependency_overrides[get_search_service] = lambda: search_service
    app.dependency_overrides[get_weather_service] = lambda: weather_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health_endpoint(client, tmp_path):
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, serp_api_key="test_api_key", data_dir=tmp_path
    )

    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["serp_api_configured"] is True
    assert data["weather_timezone"] == "Asia/Colombo"


@pytest.mark.asyncio
async def test_health_degraded_without_serp_key(client, tmp_path):
    """SerpAPI キー未設定ならフォールバック専用として degraded"""
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, serp_api_key="", data_dir=tmp_path
    )

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["serp_api_configured"] is False


@pytest.mark.asyncio
async def test_get_hotels_endpoint(client, search_service):
    """ホテル一覧取得エンドポイントのテスト"""
    response = await client.get("/api/v1/hotels", params={"location": "Ella", "force_refresh": "true"})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "fallback"
    assert data["degraded"] is True
    assert data["data"][0]["reviewCount"] == 0
    assert data["data"][0]["type"] == "Hotel"
    search_service.fetch_hotels.assert_awaited_once_with("Ella", force_refresh=True)


@pytest.mark.asyncio
async def test_get_restaurants_endpoint(client, search_service):
    """レストラン一覧取得エンドポイントのテスト"""
    response = await client.get("/api/v1/restaurants")

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "network"
    assert data["data"][0]["cuisine"] == ["Seafood", "Asian"]
    search_service.fetch_restaurants.assert_awaited_once_with(None, force_refresh=False)


@pytest.mark.asyncio
async def test_get_weather_endpoint(client, weather_service):
    """天気取得エンドポイントのテスト"""
    response = await client.get(
        "/api/v1/weather",
        params={"latitude": 6.93, "longitude": 79.84, "place_name": "Galle Face"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "cache"
    assert data["data"]["current"]["feelsLike"] == 32
    assert len(data["data"]["forecast"]) == 5
    weather_service.fetch_weather.assert_awaited_once_with(6.93, 79.84, "Galle Face")


@pytest.mark.asyncio
async def test_get_weather_validates_coordinates(client):
    response = await client.get("/api/v1/weather", params={"latitude": 123, "longitude": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_clear_cache_endpoints(client, search_service, weather_service):
    """キャッシュ削除エンドポイントのテスト"""
    search_response = await client.delete("/api/v1/search/cache")
    weather_response = await client.delete("/api/v1/weather/cache")

    assert search_response.status_code == 204
    assert weather_response.status_code == 204
    search_service.clear_search_cache.assert_awaited_once()
    weather_service.clear_weather_cache.assert_awaited_once()
