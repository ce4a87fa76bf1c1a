"""
設定管理モジュール

環境変数を読み込み、アプリケーション全体で使用する設定を提供します。
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # SerpAPI Configuration
    # 未設定でもエラーにはせず、フォールバックデータで動作する
    serp_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("serp_api_key", "expo_public_serp_api_key"),
        description="SerpAPI キー",
    )
    serp_api_url: str = Field(
        default="https://serpapi.com/search.json", description="SerpAPI 検索エンドポイント"
    )
    serp_api_timeout: float = Field(default=30.0, description="SerpAPI タイムアウト（秒）")

    # Open-Meteo Configuration
    open_meteo_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast", description="Open-Meteo 予報エンドポイント"
    )
    weather_timeout: float = Field(default=15.0, description="天気 API タイムアウト（秒）")
    weather_timezone: str = Field(default="Asia/Colombo", description="天気予報のタイムゾーン")

    # Search Defaults
    default_location: str = Field(default="Sri Lanka", description="デフォルト検索地域")
    restaurant_map_center: str = Field(
        default="@7.8731,80.7718,8z", description="レストラン検索の地図中心座標"
    )

    # Cache Configuration
    search_cache_ttl_hours: float = Field(
        default=12, description="ホテル/レストランのキャッシュ有効期間（時間）"
    )
    weather_cache_ttl_minutes: float = Field(default=30, description="天気キャッシュ有効期間（分）")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/cache.db", description="データベース URL"
    )

    # Storage Configuration
    data_dir: Path = Field(default=Path("./data"), description="ローカルデータディレクトリ")

    # Application Configuration
    log_level: str = Field(default="INFO", description="ログレベル")
    environment: str = Field(default="development", description="実行環境")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # SQLite ファイルの保存先ディレクトリを作成
        self.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    """設定インスタンスを取得（シングルトン）"""
    return Settings()
