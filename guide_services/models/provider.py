"""
外部プロバイダーのレスポンスモデル

SerpAPI (google_hotels / google_maps) と Open-Meteo のレスポンスを境界で検証します。
未知のフィールドは無視し、欠落しうるフィールドはすべて任意とします。
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderModel(BaseModel):
    """プロバイダーモデル共通設定"""

    model_config = ConfigDict(extra="ignore")


# --- SerpAPI ---------------------------------------------------------------


class ProviderErrorResponse(ProviderModel):
    """200 レスポンス内で報告されたエラー"""

    error: str


class RateInfo(ProviderModel):
    """料金情報"""

    lowest: Optional[str] = None
    extracted_lowest: Optional[float] = None


class HotelImage(ProviderModel):
    """ホテル画像"""

    thumbnail: Optional[str] = None
    original_image: Optional[str] = None


class GpsInfo(ProviderModel):
    latitude: float
    longitude: float


class RawHotelProperty(ProviderModel):
    """google_hotels の properties[] 要素"""

    property_token: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    link: Optional[str] = None
    type: Optional[str] = None
    overall_rating: Optional[float] = None
    reviews: Optional[int] = None
    rate_per_night: Optional[RateInfo] = None
    total_rate: Optional[RateInfo] = None
    images: list[HotelImage] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    hotel_class: Optional[str] = None
    extracted_hotel_class: Optional[int] = None
    eco_certified: bool = False
    gps_coordinates: Optional[GpsInfo] = None

    @field_validator("images", "amenities", mode="before")
    @classmethod
    def _null_list_as_empty(cls, v: Any) -> Any:
        # null は空リスト、要素の null は除外
        if v is None:
            return []
        if isinstance(v, list):
            return [a for a in v if a is not None]
        return v

    @field_validator("eco_certified", mode="before")
    @classmethod
    def _null_as_false(cls, v: Any) -> Any:
        return False if v is None else v


class HotelSearchResponse(ProviderModel):
    """google_hotels の検索結果"""

    properties: list[RawHotelProperty] = Field(default_factory=list)

    @field_validator("properties", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class RawLocalResult(ProviderModel):
    """google_maps の local_results[] 要素"""

    place_id: Optional[str] = None
    title: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    price: Optional[str] = None
    thumbnail: Optional[str] = None
    type: Optional[str] = None
    website: Optional[str] = None


class MapsSearchResponse(ProviderModel):
    """google_maps の検索結果"""

    local_results: list[RawLocalResult] = Field(default_factory=list)

    @field_validator("local_results", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


SearchResponse = Union[HotelSearchResponse, MapsSearchResponse, ProviderErrorResponse]


def parse_search_response(data: dict[str, Any], engine: str) -> SearchResponse:
    """SerpAPI のレスポンスを検証してモデルに変換

    Args:
        data: レスポンス JSON
        engine: 検索エンジン識別子（google_hotels / google_maps）

    Returns:
        エンジンに対応するレスポンスモデル、または ProviderErrorResponse

    Raises:
        pydantic.ValidationError: 形式が不正な場合
        ValueError: 未知のエンジン
    """
    if data.get("error"):
        return ProviderErrorResponse(error=str(data["error"]))
    if engine == "google_hotels":
        return HotelSearchResponse.model_validate(data)
    if engine == "google_maps":
        return MapsSearchResponse.model_validate(data)
    raise ValueError(f"Unknown search engine: {engine}")


# --- Open-Meteo ------------------------------------------------------------


class CurrentConditions(ProviderModel):
    """current ブロック"""

    temperature_2m: float
    relative_humidity_2m: float
    apparent_temperature: float
    weather_code: int
    wind_speed_10m: float


class DailySeries(ProviderModel):
    """daily ブロック（各配列は time と同じ長さ）"""

    time: list[str]
    weather_code: list[int]
    temperature_2m_max: list[float]
    temperature_2m_min: list[float]


class ForecastResponse(ProviderModel):
    """Open-Meteo 予報レスポンス"""

    current: CurrentConditions
    daily: DailySeries
