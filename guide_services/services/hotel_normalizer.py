"""
ホテル検索結果の正規化

google_hotels の properties[] をアプリの HotelRecord に変換します。
"""

import math
import re
from typing import Optional

from guide_services.models.provider import RawHotelProperty
from guide_services.models.records import GpsCoordinates, HotelRecord

DEFAULT_HOTEL_PRICE = 25000
DEFAULT_HOTEL_IMAGE = "https://images.unsplash.com/photo-1566073771259-6a8506099945?w=400"
DEFAULT_HOTEL_RATING = 4.5
DEFAULT_LOCATION = "Sri Lanka"
STAY_NIGHTS = 2
MAX_AMENITY_ICONS = 4
TOP_RATED_THRESHOLD = 4.5

# アメニティ名（小文字）→ アイコン名。先に一致したものが優先される
AMENITY_ICONS: tuple[tuple[str, str], ...] = (
    ("free wi-fi", "wifi"),
    ("wi-fi", "wifi"),
    ("wifi", "wifi"),
    ("pool", "pool"),
    ("swimming pool", "pool"),
    ("pools", "pool"),
    ("spa", "spa"),
    ("restaurant", "silverware-fork-knife"),
    ("fitness", "dumbbell"),
    ("gym", "dumbbell"),
    ("fitness center", "dumbbell"),
    ("parking", "car"),
    ("free parking", "car"),
    ("air conditioning", "air-conditioner"),
    ("air-conditioned", "air-conditioner"),
    ("breakfast", "food-croissant"),
    ("free breakfast", "food-croissant"),
    ("bar", "glass-cocktail"),
    ("beach", "beach"),
    ("beach access", "beach"),
    ("airport shuttle", "bus"),
    ("shuttle", "bus"),
    ("hot tub", "hot-tub"),
    ("pet-friendly", "paw"),
    ("ev charger", "ev-station"),
)
DEFAULT_AMENITY_ICONS = ("wifi", "pool", "silverware-fork-knife", "spa")

_NUMBER_PATTERN = re.compile(r"[\d.]+")


def round_half_up(value: float) -> int:
    """四捨五入（0.5 は切り上げ）"""
    return int(math.floor(value + 0.5))


def extract_price(price_str: Optional[str]) -> Optional[int]:
    """通貨表記の文字列から数値を取り出す

    桁区切りのカンマを除去し、先頭の数値トークンを使用する。

    >>> extract_price("$1,234")
    1234
    """
    if not price_str:
        return None
    match = _NUMBER_PATTERN.search(price_str.replace(",", ""))
    if not match:
        return None
    try:
        return round_half_up(float(match.group(0)))
    except ValueError:
        # "1.2.3" のようなトークン
        return None


def derive_price(item: RawHotelProperty) -> int:
    """1泊あたりの料金を決定"""
    nightly = item.rate_per_night
    if nightly and nightly.extracted_lowest:
        return round_half_up(nightly.extracted_lowest)
    if nightly and nightly.lowest:
        parsed = extract_price(nightly.lowest)
        if parsed is not None:
            return parsed
    if item.total_rate and item.total_rate.extracted_lowest:
        return round_half_up(item.total_rate.extracted_lowest / STAY_NIGHTS)
    return DEFAULT_HOTEL_PRICE


def pick_image(item: RawHotelProperty) -> str:
    """先頭の写真を選択（フル解像度を優先）"""
    if item.images:
        first = item.images[0]
        return first.original_image or first.thumbnail or DEFAULT_HOTEL_IMAGE
    return DEFAULT_HOTEL_IMAGE


def map_amenities_to_icons(amenities: list[str]) -> list[str]:
    """アメニティ名をアイコン名に変換

    各アメニティについて最初に部分一致した同義語のアイコンを採用し、
    最大4件まで収集する。一致が無ければデフォルトのセットを返す。
    """
    icons: list[str] = []
    for amenity in (a.lower() for a in amenities):
        for keyword, icon in AMENITY_ICONS:
            if keyword in amenity and icon not in icons:
                icons.append(icon)
                break
        if len(icons) >= MAX_AMENITY_ICONS:
            break

    if not icons:
        return list(DEFAULT_AMENITY_ICONS)
    return icons


def extract_hotel_tags(item: RawHotelProperty) -> list[str]:
    """ホテルのタグを生成"""
    tags = []
    if item.extracted_hotel_class:
        tags.append(f"{item.extracted_hotel_class} Star")
    elif item.hotel_class:
        tags.append(item.hotel_class)
    if item.eco_certified:
        tags.append("Eco-certified")
    if item.type == "vacation rental":
        tags.append("Vacation Rental")
    if item.overall_rating is not None and item.overall_rating >= TOP_RATED_THRESHOLD:
        tags.append("Top Rated")
    return tags or ["Hotel"]


def normalize_hotel(
    item: RawHotelProperty, index: int, location: Optional[str] = None
) -> HotelRecord:
    """1件のホテルを正規化

    Args:
        item: google_hotels の properties[] 要素
        index: 結果内の位置（ID が無い場合の合成 ID に使用）
        location: 検索した地域名（説明文が無い場合の所在地）

    Returns:
        HotelRecord
    """
    gps = None
    if item.gps_coordinates:
        gps = GpsCoordinates(
            latitude=item.gps_coordinates.latitude,
            longitude=item.gps_coordinates.longitude,
        )

    return HotelRecord(
        id=item.property_token or f"hotel_{index}",
        name=item.name or "Unknown Hotel",
        location=item.description or location or DEFAULT_LOCATION,
        rating=item.overall_rating or DEFAULT_HOTEL_RATING,
        review_count=item.reviews or 0,
        price=derive_price(item),
        image=pick_image(item),
        tags=extract_hotel_tags(item),
        amenities=map_amenities_to_icons(item.amenities),
        link=item.link,
        hotel_class=item.extracted_hotel_class,
        gps_coordinates=gps,
    )


def normalize_hotels(
    properties: list[RawHotelProperty], location: Optional[str] = None, limit: int = 10
) -> list[HotelRecord]:
    """先頭 limit 件のホテルを正規化"""
    return [normalize_hotel(item, index, location) for index, item in enumerate(properties[:limit])]
