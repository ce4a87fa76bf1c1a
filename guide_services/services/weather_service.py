"""
天気サービス

Open-Meteo の予報をアプリの WeatherSnapshot に変換し、地点ごとにキャッシュします。
"""

import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from guide_services.config.logging import get_logger, get_logger_with_context
from guide_services.config.settings import Settings, get_settings
from guide_services.models.provider import ForecastResponse
from guide_services.models.records import (
    CurrentWeather,
    DataSource,
    FetchResult,
    ForecastDay,
    WeatherSnapshot,
)
from guide_services.services.cache_store import CacheStore
from guide_services.services.error_handler import handle_error
from guide_services.services.fallbacks import get_fallback_weather
from guide_services.services.hotel_normalizer import round_half_up
from guide_services.services.weather_client import OpenMeteoClient

logger = get_logger(__name__)

WEATHER_CACHE_PREFIX = "weather_cache_"
FORECAST_LENGTH = 5

# WMO 天気コード → (状態, アイコン)
WEATHER_CODES: dict[int, tuple[str, str]] = {
    0: ("Clear sky", "☀️"),
    1: ("Mainly clear", "🌤️"),
    2: ("Partly cloudy", "⛅"),
    3: ("Overcast", "☁️"),
    45: ("Fog", "🌫️"),
    48: ("Rime fog", "🌫️"),
    51: ("Light drizzle", "🌦️"),
    53: ("Moderate drizzle", "🌦️"),
    55: ("Dense drizzle", "🌧️"),
    56: ("Freezing drizzle", "🌧️"),
    57: ("Heavy freezing drizzle", "🌧️"),
    61: ("Slight rain", "🌧️"),
    63: ("Moderate rain", "🌧️"),
    65: ("Heavy rain", "🌧️"),
    66: ("Freezing rain", "🌨️"),
    67: ("Heavy freezing rain", "🌨️"),
    71: ("Slight snow", "🌨️"),
    73: ("Moderate snow", "❄️"),
    75: ("Heavy snow", "❄️"),
    77: ("Snow grains", "❄️"),
    80: ("Slight showers", "🌦️"),
    81: ("Moderate showers", "🌧️"),
    82: ("Violent showers", "🌧️"),
    85: ("Slight snow showers", "🌨️"),
    86: ("Heavy snow showers", "🌨️"),
    95: ("Thunderstorm", "⛈️"),
    96: ("Thunderstorm with hail", "⛈️"),
    99: ("Thunderstorm with heavy hail", "⛈️"),
}
UNKNOWN_WEATHER = ("Unknown", "🌤️")

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_WHITESPACE = re.compile(r"\s")


def get_weather_info(code: int) -> tuple[str, str]:
    """天気コードから (状態, アイコン) を取得"""
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)


def get_day_name(date_string: str, index: int) -> str:
    """予報の表示ラベル（今日、明日、それ以降は曜日名）"""
    if index == 0:
        return "Today"
    if index == 1:
        return "Tomorrow"
    return DAY_NAMES[date.fromisoformat(date_string).weekday()]


def calculate_uv_index(hour: int) -> str:
    """時刻から UV 指数の目安を推定（実測値ではない）"""
    if 10 <= hour <= 14:
        return "High"
    if 8 <= hour < 10 or 14 < hour <= 16:
        return "Moderate"
    return "Low"


def weather_cache_key(place_name: str) -> str:
    return f"{WEATHER_CACHE_PREFIX}{_WHITESPACE.sub('_', place_name)}"


def build_snapshot(forecast: ForecastResponse, hour: int) -> WeatherSnapshot:
    """Open-Meteo のレスポンスを WeatherSnapshot に変換

    Args:
        forecast: 予報レスポンス
        hour: 現在時刻（時）。UV 指数の推定に使用

    Returns:
        WeatherSnapshot
    """
    current = forecast.current
    condition, icon = get_weather_info(current.weather_code)

    daily = forecast.daily
    days = []
    series = zip(daily.time, daily.weather_code, daily.temperature_2m_max, daily.temperature_2m_min)
    for index, (day, code, high, low) in enumerate(series):
        if index >= FORECAST_LENGTH:
            break
        day_condition, day_icon = get_weather_info(code)
        days.append(
            ForecastDay(
                day=get_day_name(day, index),
                condition=day_condition,
                icon=day_icon,
                high=round_half_up(high),
                low=round_half_up(low),
            )
        )

    return WeatherSnapshot(
        current=CurrentWeather(
            temperature=round_half_up(current.temperature_2m),
            condition=condition,
            icon=icon,
            feels_like=round_half_up(current.apparent_temperature),
            humidity=round_half_up(current.relative_humidity_2m),
            wind_speed=round_half_up(current.wind_speed_10m),
            uv_index=calculate_uv_index(hour),
        ),
        forecast=days,
    )


class WeatherService:
    """天気サービス"""

    def __init__(
        self,
        cache: CacheStore,
        client: Optional[OpenMeteoClient] = None,
        settings: Optional[Settings] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache
        self.client = client or OpenMeteoClient(self.settings)
        self._now = now or self._local_now

    def _local_now(self) -> datetime:
        """予報と同じタイムゾーンの現在時刻（UV 指数の時間帯判定に使用）"""
        return datetime.now(ZoneInfo(self.settings.weather_timezone))

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.weather_cache_ttl_minutes)

    async def close(self):
        """クライアントを閉じる"""
        await self.client.close()

    async def fetch_weather(
        self, latitude: float, longitude: float, place_name: str = "location"
    ) -> FetchResult[WeatherSnapshot]:
        """地点の天気を取得

        キャッシュ（30分）にあればそれを返し、無ければ API から取得する。
        取得に失敗した場合は固定のフォールバックデータを返す。

        Args:
            latitude: 緯度
            longitude: 経度
            place_name: 地点名（キャッシュキーに使用）

        Returns:
            天気スナップショット
        """
        cache_key = weather_cache_key(place_name)
        log = get_logger_with_context(__name__, place_name=place_name, cache_key=cache_key)
        result_type = FetchResult[WeatherSnapshot]

        cached = await self.cache.get(cache_key, self.cache_ttl)
        if cached is not None:
            try:
                return result_type.from_cache(WeatherSnapshot.model_validate(cached))
            except ValueError as e:
                log.warning(f"Discarding malformed weather cache: {str(e)}")

        try:
            log.info(f"Fetching weather for {place_name} ({latitude}, {longitude})")
            forecast = await self.client.get_forecast(latitude, longitude)
            snapshot = build_snapshot(forecast, self._now().hour)
        except Exception as e:
            error = handle_error(e, {"place_name": place_name})
            log.warning(
                f"Using fallback weather for {place_name}",
                extra={"source": DataSource.FALLBACK.value, "error_code": error.code.value},
            )
            return result_type.from_fallback(get_fallback_weather(), error)

        await self.cache.set(cache_key, snapshot.model_dump(mode="json", by_alias=True))
        log.info(f"Cached weather for {place_name}", extra={"source": DataSource.NETWORK.value})
        return result_type.from_network(snapshot)

    async def clear_weather_cache(self) -> None:
        """天気キャッシュをすべて削除"""
        await self.cache.clear(WEATHER_CACHE_PREFIX)
