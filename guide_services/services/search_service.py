"""
ホテル・レストラン検索サービス

キャッシュ確認 → SerpAPI 検索 → 正規化 → キャッシュ保存 の順に処理し、
どの段階で失敗してもフォールバックデータを返します。
"""

from datetime import date, timedelta
from typing import Any, Callable, Optional

from pydantic import ValidationError

from guide_services.config.logging import get_logger
from guide_services.config.settings import Settings, get_settings
from guide_services.models.provider import ProviderErrorResponse, parse_search_response
from guide_services.models.records import FetchResult, HotelRecord, RestaurantRecord
from guide_services.services.cache_store import CacheStore
from guide_services.services.error_handler import (
    ErrorResponse,
    MissingCredentialError,
    ProviderReportedError,
    ResponseValidationError,
    handle_error,
)
from guide_services.services.fallbacks import get_fallback_hotels, get_fallback_restaurants
from guide_services.services.hotel_normalizer import STAY_NIGHTS, normalize_hotels
from guide_services.services.restaurant_normalizer import normalize_restaurants
from guide_services.services.serp_client import SerpApiClient

logger = get_logger(__name__)

HOTELS_CACHE_KEY = "cached_google_hotels"
RESTAURANTS_CACHE_KEY = "cached_google_restaurants"

HOTELS_ENGINE = "google_hotels"
RESTAURANTS_ENGINE = "google_maps"

# 取り込む検索結果の最大件数
MAX_RESULTS = 10
CHECK_IN_OFFSET_DAYS = 7
DEFAULT_ADULTS = 2


def stay_window(today: date) -> tuple[str, str]:
    """チェックイン/チェックアウト日（1週間後から2泊）"""
    check_in = today + timedelta(days=CHECK_IN_OFFSET_DAYS)
    check_out = check_in + timedelta(days=STAY_NIGHTS)
    return check_in.isoformat(), check_out.isoformat()


class SearchService:
    """ホテル・レストラン検索サービス"""

    def __init__(
        self,
        cache: CacheStore,
        client: Optional[SerpApiClient] = None,
        settings: Optional[Settings] = None,
        today: Callable[[], date] = date.today,
    ):
        self.settings = settings or get_settings()
        self.cache = cache
        self.client = client or SerpApiClient(self.settings)
        self._today = today

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.settings.search_cache_ttl_hours)

    async def close(self):
        """クライアントを閉じる"""
        await self.client.close()

    async def fetch_hotels(
        self, location: Optional[str] = None, force_refresh: bool = False
    ) -> FetchResult[list[HotelRecord]]:
        """ホテル一覧を取得

        Args:
            location: 検索地域（省略時は設定のデフォルト地域）
            force_refresh: キャッシュを無視して再取得するか

        Returns:
            ホテル一覧（空にはならない）
        """
        location = location or self.settings.default_location
        result_type = FetchResult[list[HotelRecord]]

        if not force_refresh:
            cached = await self._get_cached_items(HOTELS_CACHE_KEY, location)
            if cached is not None:
                try:
                    return result_type.from_cache([HotelRecord.model_validate(i) for i in cached])
                except ValidationError as e:
                    logger.warning(f"Discarding malformed hotel cache: {str(e)}")

        check_in, check_out = stay_window(self._today())
        params = {
            "engine": HOTELS_ENGINE,
            "q": location,
            "check_in_date": check_in,
            "check_out_date": check_out,
            "adults": DEFAULT_ADULTS,
            "currency": "USD",
            "gl": "us",
            "hl": "en",
        }

        try:
            response = await self._search(params)
            logger.info(f"Found {len(response.properties)} hotels for {location}")
            hotels = normalize_hotels(response.properties, location, limit=MAX_RESULTS)
        except Exception as e:
            return result_type.from_fallback(get_fallback_hotels(), self._report(e, HOTELS_ENGINE))

        if not hotels:
            logger.warning("No hotels in provider response, using fallback hotels")
            return result_type.from_fallback(get_fallback_hotels())

        await self._set_cached_items(HOTELS_CACHE_KEY, location, hotels)
        return result_type.from_network(hotels)

    async def fetch_restaurants(
        self, location: Optional[str] = None, force_refresh: bool = False
    ) -> FetchResult[list[RestaurantRecord]]:
        """レストラン一覧を取得

        Args:
            location: 検索地域（省略時は設定のデフォルト地域）
            force_refresh: キャッシュを無視して再取得するか

        Returns:
            レストラン一覧（空にはならない）
        """
        location = location or self.settings.default_location
        result_type = FetchResult[list[RestaurantRecord]]

        if not force_refresh:
            cached = await self._get_cached_items(RESTAURANTS_CACHE_KEY, location)
            if cached is not None:
                try:
                    return result_type.from_cache(
                        [RestaurantRecord.model_validate(i) for i in cached]
                    )
                except ValidationError as e:
                    logger.warning(f"Discarding malformed restaurant cache: {str(e)}")

        params = {
            "engine": RESTAURANTS_ENGINE,
            "q": f"restaurants {location}",
            "ll": self.settings.restaurant_map_center,
            "hl": "en",
        }

        try:
            response = await self._search(params)
            logger.info(f"Found {len(response.local_results)} restaurants for {location}")
            restaurants = normalize_restaurants(response.local_results, limit=MAX_RESULTS)
        except Exception as e:
            return result_type.from_fallback(
                get_fallback_restaurants(), self._report(e, RESTAURANTS_ENGINE)
            )

        if not restaurants:
            logger.warning("No restaurants in provider response, using fallback restaurants")
            return result_type.from_fallback(get_fallback_restaurants())

        await self._set_cached_items(RESTAURANTS_CACHE_KEY, location, restaurants)
        return result_type.from_network(restaurants)

    async def clear_search_cache(self) -> None:
        """ホテル・レストランのキャッシュを削除"""
        await self.cache.delete(HOTELS_CACHE_KEY, RESTAURANTS_CACHE_KEY)

    async def _search(self, params: dict[str, Any]):
        """検索してレスポンスモデルに変換

        Raises:
            MissingCredentialError: API キー未設定
            TransportError: 通信エラー
            ProviderReportedError: プロバイダーエラー
            ResponseValidationError: レスポンス形式不正
        """
        engine = params["engine"]
        data = await self.client.search(params)
        try:
            response = parse_search_response(data, engine)
        except ValidationError as e:
            raise ResponseValidationError(
                "SerpAPI レスポンスの形式が不正です",
                details={"engine": engine},
                original_error=e,
            ) from e

        if isinstance(response, ProviderErrorResponse):
            raise ProviderReportedError(
                f"SerpAPI エラー: {response.error}", details={"engine": engine}
            )
        return response

    def _report(self, error: Exception, engine: str) -> ErrorResponse:
        """劣化理由をログに記録して ErrorResponse を返す"""
        if isinstance(error, MissingCredentialError):
            # 想定された縮退モード
            logger.warning(
                "SerpAPI key not configured, using fallback data", extra={"engine": engine}
            )
            return error.to_response()
        return handle_error(error, {"engine": engine})

    async def _get_cached_items(self, key: str, location: str) -> Optional[list[dict[str, Any]]]:
        """同じ地域で保存されたキャッシュを取得"""
        cached = await self.cache.get(key, self.cache_ttl)
        if not isinstance(cached, dict):
            return None
        if str(cached.get("location", "")).casefold() != location.casefold():
            logger.info(
                f"Cached {key} is for {cached.get('location')}, not {location}",
                extra={"cache_key": key},
            )
            return None
        items = cached.get("items")
        return items if isinstance(items, list) and items else None

    async def _set_cached_items(self, key: str, location: str, records: list) -> None:
        await self.cache.set(
            key,
            {
                "location": location,
                "items": [r.model_dump(mode="json", by_alias=True) for r in records],
            },
        )
        logger.info(f"Cached {len(records)} items to {key}", extra={"cache_key": key})
