"""
メインアプリケーション

FastAPI アプリケーションのエントリーポイント
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guide_services.api.health import VERSION, router as health_router
from guide_services.api.travel import router as travel_router
from guide_services.config.logging import get_logger, setup_logging
from guide_services.config.settings import get_settings
from guide_services.database.connection import close_db, get_session_maker, init_db
from guide_services.services.cache_store import CacheStore
from guide_services.services.error_handler import ApplicationError, handle_error
from guide_services.services.search_service import SearchService
from guide_services.services.weather_service import WeatherService

# ログ設定
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """アプリケーションライフサイクル管理

    起動時と終了時の処理を定義
    """
    # 起動時
    logger.info("Application starting...")
    settings = get_settings()
    logger.info(f"Environment: {settings.environment}")
    if not settings.serp_api_key:
        logger.warning("SERP_API_KEY is not set; hotel and restaurant data will use fallbacks")

    # データベース初期化
    await init_db()

    # キャッシュとサービスはプロセスで1つだけ生成する
    cache = CacheStore(get_session_maker())
    app.state.search_service = SearchService(cache, settings=settings)
    app.state.weather_service = WeatherService(cache, settings=settings)

    yield

    # 終了時
    logger.info("Application shutting down...")
    await app.state.search_service.close()
    await app.state.weather_service.close()
    await close_db()
    logger.info("Application shutdown complete")


# FastAPI アプリケーション作成
def create_app() -> FastAPI:
    """FastAPI アプリケーションを作成

    Returns:
        FastAPI: アプリケーションインスタンス
    """
    app = FastAPI(
        title="Guide Services API",
        description="ホテル・レストラン・天気データ API",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS ミドルウェア設定
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # 本番環境では適切に制限する
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # エラーハンドラー登録
    @app.exception_handler(ApplicationError)
    async def application_error_handler(request: Request, exc: ApplicationError):
        """ApplicationError ハンドラー"""
        error_response = exc.to_response()
        logger.error(
            f"Application error: {exc.code} - {exc.message}",
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=400, content=error_response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """一般的な例外ハンドラー"""
        context = {"path": request.url.path, "method": request.method}
        error_response = handle_error(exc, context)
        return JSONResponse(status_code=500, content=error_response.model_dump(mode="json"))

    # ルーター登録
    app.include_router(health_router, tags=["health"])
    app.include_router(travel_router)

    return app


# アプリケーションインスタンス
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "guide_services.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
    )
