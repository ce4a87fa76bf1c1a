"""
レストラン検索結果の正規化

google_maps の local_results[] をアプリの RestaurantRecord に変換します。
"""

from typing import Optional

from guide_services.models.provider import RawLocalResult
from guide_services.models.records import RestaurantRecord

DEFAULT_RESTAURANT_PRICE = 3500
DEFAULT_RESTAURANT_IMAGE = "https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=400"
DEFAULT_RESTAURANT_RATING = 4.5
DEFAULT_LOCATION = "Sri Lanka"
POPULAR_THRESHOLD = 4.5

# google_maps はアメニティを返さないため固定
RESTAURANT_AMENITY_ICONS = ("silverware-fork-knife", "glass-cocktail", "wifi")


def price_from_level(price_level: Optional[str]) -> int:
    """価格帯（"$$$" など）の記号数から料金の目安を算出"""
    if not price_level:
        return DEFAULT_RESTAURANT_PRICE
    return price_level.count("$") * 2000 + 1500


def extract_restaurant_tags(item: RawLocalResult) -> list[str]:
    tags = []
    if item.type:
        tags.append(item.type)
    if item.price:
        tags.append(item.price)
    if item.rating is not None and item.rating >= POPULAR_THRESHOLD:
        tags.append("Popular")
    return tags or ["Restaurant"]


def normalize_restaurant(item: RawLocalResult, index: int) -> RestaurantRecord:
    """1件のレストランを正規化"""
    return RestaurantRecord(
        id=item.place_id or f"restaurant_{index}",
        name=item.title or "Unknown Restaurant",
        location=item.address or DEFAULT_LOCATION,
        rating=item.rating or DEFAULT_RESTAURANT_RATING,
        review_count=item.reviews or 0,
        price=price_from_level(item.price),
        image=item.thumbnail or DEFAULT_RESTAURANT_IMAGE,
        tags=extract_restaurant_tags(item),
        amenities=list(RESTAURANT_AMENITY_ICONS),
        cuisine=[item.type] if item.type else ["Restaurant"],
        link=item.website,
        price_level=item.price,
    )


def normalize_restaurants(results: list[RawLocalResult], limit: int = 10) -> list[RestaurantRecord]:
    """先頭 limit 件のレストランを正規化"""
    return [normalize_restaurant(item, index) for index, item in enumerate(results[:limit])]
