"""
正規化済みレコードモデル

HotelRecord, RestaurantRecord, WeatherSnapshot, FetchResult

UI 側は camelCase のフィールド名で受け取るため、シリアライズ時は alias を使用します。
"""

from enum import Enum
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from guide_services.services.error_handler import ErrorResponse

T = TypeVar("T")


class RecordModel(BaseModel):
    """レコード共通設定"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GpsCoordinates(RecordModel):
    """緯度経度"""

    latitude: float
    longitude: float


class HotelRecord(RecordModel):
    """ホテル"""

    id: str
    name: str
    location: str
    rating: float
    review_count: int = 0
    price: int
    image: str
    tags: list[str] = Field(min_length=1)
    amenities: list[str] = Field(max_length=4)
    type: Literal["Hotel"] = "Hotel"
    link: Optional[str] = None
    hotel_class: Optional[int] = None
    gps_coordinates: Optional[GpsCoordinates] = None


class RestaurantRecord(RecordModel):
    """レストラン"""

    id: str
    name: str
    location: str
    rating: float
    review_count: int = 0
    price: int
    image: str
    tags: list[str] = Field(min_length=1)
    amenities: list[str]
    type: Literal["Restaurant"] = "Restaurant"
    cuisine: list[str] = Field(min_length=1)
    link: Optional[str] = None
    price_level: Optional[str] = None


class CurrentWeather(RecordModel):
    """現在の天気"""

    temperature: int
    condition: str
    icon: str
    feels_like: int
    humidity: int
    wind_speed: int
    uv_index: Literal["Low", "Moderate", "High"]


class ForecastDay(RecordModel):
    """日別予報"""

    day: str
    condition: str
    icon: str
    high: int
    low: int


class WeatherSnapshot(RecordModel):
    """天気スナップショット（現在 + 最大5日分の予報）"""

    current: CurrentWeather
    forecast: list[ForecastDay] = Field(max_length=5)


class DataSource(str, Enum):
    """データの取得元"""

    CACHE = "cache"
    NETWORK = "network"
    FALLBACK = "fallback"


class FetchResult(BaseModel, Generic[T]):
    """取得結果

    取得処理は失敗しない。フォールバックデータの場合は degraded=True となり、
    error に劣化の理由が入る。
    """

    data: T
    source: DataSource
    degraded: bool = False
    error: Optional[ErrorResponse] = None

    @classmethod
    def from_cache(cls, data: T) -> "FetchResult[T]":
        return cls(data=data, source=DataSource.CACHE)

    @classmethod
    def from_network(cls, data: T) -> "FetchResult[T]":
        return cls(data=data, source=DataSource.NETWORK)

    @classmethod
    def from_fallback(cls, data: T, error: Optional[ErrorResponse] = None) -> "FetchResult[T]":
        return cls(data=data, source=DataSource.FALLBACK, degraded=True, error=error)
