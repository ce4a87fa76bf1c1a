"""
フォールバックデータ

API キー未設定や通信エラー時に返す固定データ。呼び出しごとに新しいインスタンスを生成します。
"""

from guide_services.models.records import (
    CurrentWeather,
    ForecastDay,
    HotelRecord,
    RestaurantRecord,
    WeatherSnapshot,
)


def get_fallback_hotels() -> list[HotelRecord]:
    """フォールバック用のホテル一覧"""
    return [
        HotelRecord(
            id="fallback_h1",
            name="Cinnamon Grand Colombo",
            location="Colombo, Western Province",
            price=35000,
            rating=4.8,
            image="https://www.cvent.com/venues/_next/image?url=https%3A%2F%2Fimages.cvent.com%2Fcsn%2Fbe1da351-c8fb-4ff4-b26d-1afa3bac6e17%2Fimages%2F55e2456e89cc413aa2ba16cca3123bb3_large!_!93422dbcfd6ff08924b489746fc72ead.jpg&w=3840&q=80",
            tags=["5 Star", "Luxury"],
            amenities=["wifi", "pool", "silverware-fork-knife", "spa"],
        ),
        HotelRecord(
            id="fallback_h2",
            name="Heritance Kandalama",
            location="Dambulla, Central Province",
            price=45000,
            rating=4.9,
            image="https://exploresrilanka.lk/wp-content/uploads/2013/11/1-copy2-1.webp",
            tags=["Eco-certified", "Nature"],
            amenities=["wifi", "pool", "leaf", "spa"],
        ),
        HotelRecord(
            id="fallback_h3",
            name="Shangri-La Hambantota",
            location="Hambantota, Southern Province",
            price=52000,
            rating=4.7,
            image="https://dynamic-media-cdn.tripadvisor.com/media/photo-o/23/8f/bc/d4/shangri-la-hambantota.jpg?w=900&h=500&s=1",
            tags=["5 Star", "Resort"],
            amenities=["wifi", "pool", "golf", "beach"],
        ),
        HotelRecord(
            id="fallback_h4",
            name="98 Acres Resort & Spa",
            location="Ella, Uva Province",
            price=42000,
            rating=4.9,
            image="https://cf.bstatic.com/xdata/images/hotel/max1024x768/123777522.jpg",
            tags=["Boutique", "Top Rated"],
            amenities=["wifi", "terrain", "spa"],
        ),
        HotelRecord(
            id="fallback_h5",
            name="Jetwing Lighthouse",
            location="Galle, Southern Province",
            price=38000,
            rating=4.6,
            image="https://images.unsplash.com/photo-1582719508461-905c673771fd?w=400",
            tags=["Beachfront", "Heritage"],
            amenities=["wifi", "pool", "beach", "spa"],
        ),
    ]


def get_fallback_restaurants() -> list[RestaurantRecord]:
    """フォールバック用のレストラン一覧"""
    return [
        RestaurantRecord(
            id="fallback_r1",
            name="Ministry of Crab",
            location="Colombo Fort, Colombo",
            price=8000,
            rating=4.9,
            image="https://images.unsplash.com/photo-1559339352-11d035aa65de?w=400",
            tags=["Seafood", "$$$$"],
            amenities=["silverware-fork-knife", "glass-cocktail", "wifi"],
            cuisine=["Seafood", "Asian"],
        ),
        RestaurantRecord(
            id="fallback_r2",
            name="Nuga Gama at Cinnamon Grand",
            location="Colombo 3, Western Province",
            price=4500,
            rating=4.7,
            image="https://images.unsplash.com/photo-1552566626-52f8b828add9?w=400",
            tags=["Sri Lankan", "$$$"],
            amenities=["silverware-fork-knife", "leaf", "wifi"],
            cuisine=["Sri Lankan", "Traditional"],
        ),
        RestaurantRecord(
            id="fallback_r3",
            name="The Gallery Cafe",
            location="Colombo 3, Western Province",
            price=3500,
            rating=4.5,
            image="https://images.unsplash.com/photo-1554118811-1e0d58224f24?w=400",
            tags=["Cafe", "Popular"],
            amenities=["coffee", "silverware-fork-knife", "wifi"],
            cuisine=["Cafe", "Western"],
        ),
        RestaurantRecord(
            id="fallback_r4",
            name="Upali's by Nawaloka",
            location="Colombo 2, Western Province",
            price=2500,
            rating=4.4,
            image="https://images.unsplash.com/photo-1517248135467-4c7edcad34c4?w=400",
            tags=["Sri Lankan", "$$"],
            amenities=["silverware-fork-knife", "leaf"],
            cuisine=["Sri Lankan"],
        ),
        RestaurantRecord(
            id="fallback_r5",
            name="Curry Leaf - Hilton",
            location="Colombo 1, Western Province",
            price=5500,
            rating=4.6,
            image="https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=400",
            tags=["Buffet", "$$$"],
            amenities=["silverware-fork-knife", "glass-cocktail", "spa"],
            cuisine=["Sri Lankan", "International"],
        ),
    ]


def get_fallback_weather() -> WeatherSnapshot:
    """フォールバック用の天気"""
    return WeatherSnapshot(
        current=CurrentWeather(
            temperature=28,
            condition="Partly Cloudy",
            icon="⛅",
            feels_like=32,
            humidity=75,
            wind_speed=12,
            uv_index="High",
        ),
        forecast=[
            ForecastDay(day="Today", condition="Partly Cloudy", icon="⛅", high=31, low=24),
            ForecastDay(day="Tomorrow", condition="Sunny", icon="☀️", high=32, low=25),
            ForecastDay(day="Wednesday", condition="Light Rain", icon="🌧️", high=29, low=23),
            ForecastDay(day="Thursday", condition="Cloudy", icon="☁️", high=30, low=24),
            ForecastDay(day="Friday", condition="Sunny", icon="☀️", high=33, low=25),
        ],
    )
