"""
Open-Meteo クライアント

現在の天気と日別予報を取得
"""

import httpx
from pydantic import ValidationError

from guide_services.config.logging import get_logger
from guide_services.config.settings import Settings, get_settings
from guide_services.models.provider import ForecastResponse
from guide_services.services.error_handler import (
    ProviderReportedError,
    ResponseValidationError,
    TransportError,
)

logger = get_logger(__name__)

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "weather_code",
    "wind_speed_10m",
)
DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
)
FORECAST_DAYS = 7


class OpenMeteoClient:
    """Open-Meteo 予報 API クライアント"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.open_meteo_url
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得（遅延初期化）"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.settings.weather_timeout))
        return self._client

    async def close(self):
        """HTTPクライアントをクローズ"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_forecast(self, latitude: float, longitude: float) -> ForecastResponse:
        """予報を取得

        Args:
            latitude: 緯度
            longitude: 経度

        Returns:
            ForecastResponse

        Raises:
            TransportError: 通信エラー、HTTP エラー
            ProviderReportedError: Open-Meteo が理由付きでエラーを返した
            ResponseValidationError: JSON 以外、または必須フィールドの欠落
        """
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": ",".join(CURRENT_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "timezone": self.settings.weather_timezone,
            "forecast_days": FORECAST_DAYS,
        }

        try:
            client = await self._get_client()
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise TransportError(
                f"Open-Meteo リクエストに失敗しました: {str(e)}", original_error=e
            ) from e
        except ValueError as e:
            raise ResponseValidationError(
                "Open-Meteo から JSON 以外のレスポンスを受信しました", original_error=e
            ) from e

        try:
            return ForecastResponse.model_validate(data)
        except ValidationError as e:
            reason = data.get("reason") if isinstance(data, dict) else None
            if reason:
                raise ProviderReportedError(
                    f"Open-Meteo エラー: {reason}", original_error=e
                ) from e
            raise ResponseValidationError(
                "Open-Meteo レスポンスの形式が不正です", original_error=e
            ) from e
