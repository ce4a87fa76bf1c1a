"""
Open-Meteo クライアントのユニットテスト
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from guide_services.services.error_handler import (
    ProviderReportedError,
    ResponseValidationError,
    TransportError,
)
from guide_services.services.weather_client import OpenMeteoClient

VALID_BODY = {
    "current": {
        "temperature_2m": 22.4,
        "relative_humidity_2m": 88,
        "apparent_temperature": 23.1,
        "weather_code": 61,
        "wind_speed_10m": 6.5,
    },
    "daily": {
        "time": ["2026-10-19", "2026-10-20"],
        "weather_code": [61, 63],
        "temperature_2m_max": [24.0, 23.5],
        "temperature_2m_min": [17.2, 16.8],
    },
}


@pytest.fixture
def weather_client(test_settings):
    """Open-Meteo クライアントのフィクスチャ"""
    return OpenMeteoClient(test_settings)


def _mock_http(weather_client, json_data=None, raise_error=None):
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = json_data
    if raise_error:
        mock_response.raise_for_status.side_effect = raise_error

    mock_client = AsyncMock()
    mock_client.get = AsyncMock(return_value=mock_response)
    mock_client.is_closed = False
    weather_client._client = mock_client
    return mock_client


@pytest.mark.asyncio
async def test_get_forecast_request(weather_client):
    """リクエストパラメータとレスポンスの検証"""
    mock_client = _mock_http(weather_client, json_data=VALID_BODY)

    forecast = await weather_client.get_forecast(6.95, 80.78)

    assert forecast.current.weather_code == 61
    assert forecast.daily.time == ["2026-10-19", "2026-10-20"]

    call_args = mock_client.get.call_args
    assert call_args[0][0] == "https://api.open-meteo.com/v1/forecast"
    params = call_args[1]["params"]
    assert params["latitude"] == 6.95
    assert params["longitude"] == 80.78
    assert params["current"] == (
        "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,wind_speed_10m"
    )
    assert params["daily"] == "weather_code,temperature_2m_max,temperature_2m_min"
    assert params["timezone"] == "Asia/Colombo"
    assert params["forecast_days"] == 7


@pytest.mark.asyncio
async def test_get_forecast_http_error(weather_client):
    """HTTP エラーは通信エラー"""
    request = httpx.Request("GET", "https://api.open-meteo.com/v1/forecast")
    response = httpx.Response(400, request=request)
    _mock_http(
        weather_client,
        raise_error=httpx.HTTPStatusError("Bad Request", request=request, response=response),
    )

    with pytest.raises(TransportError):
        await weather_client.get_forecast(999, 0)


@pytest.mark.asyncio
async def test_get_forecast_error_reason(weather_client):
    """理由付きのエラーはプロバイダーエラー"""
    _mock_http(weather_client, json_data={"error": True, "reason": "Cannot initialize WeatherVariable"})

    with pytest.raises(ProviderReportedError) as exc_info:
        await weather_client.get_forecast(6.95, 80.78)

    assert "Cannot initialize WeatherVariable" in exc_info.value.message


@pytest.mark.asyncio
async def test_get_forecast_missing_fields(weather_client):
    """必須フィールドの欠落は形式不正"""
    _mock_http(weather_client, json_data={"current": {"temperature_2m": 22.4}})

    with pytest.raises(ResponseValidationError):
        await weather_client.get_forecast(6.95, 80.78)
