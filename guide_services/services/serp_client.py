"""
SerpAPI クライアント

google_hotels / google_maps エンジンで検索し、プロバイダーの生 JSON を返す
"""

from typing import Any

import httpx

from guide_services.config.logging import get_logger
from guide_services.config.settings import Settings, get_settings
from guide_services.services.error_handler import MissingCredentialError, TransportError

logger = get_logger(__name__)


class SerpApiClient:
    """SerpAPI クライアント

    リトライは行わない（キャッシュとフォールバックで可用性を確保する）。
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.serp_api_url
        self._client: httpx.AsyncClient | None = None

    @property
    def api_key(self) -> str:
        return self.settings.serp_api_key

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTPクライアントを取得（遅延初期化）"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.settings.serp_api_timeout))
        return self._client

    async def close(self):
        """HTTPクライアントをクローズ"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def search(self, params: dict[str, Any]) -> dict[str, Any]:
        """検索を実行

        Args:
            params: クエリパラメータ（engine, q など。api_key は自動付与）

        Returns:
            レスポンス JSON（プロバイダーが報告した error フィールドを含む場合がある）

        Raises:
            MissingCredentialError: API キー未設定
            TransportError: 通信エラー、HTTP エラー、JSON 以外のレスポンス
        """
        engine = params.get("engine", "")
        if not self.has_credentials:
            raise MissingCredentialError(
                "SerpAPI キーが設定されていません", details={"engine": engine}
            )

        logger.info(
            f"Fetching {engine} results from SerpAPI",
            extra={"engine": engine},
        )
        # API キーはログに出さない
        logger.debug(f"Request params: {params}")

        try:
            client = await self._get_client()
            response = await client.get(self.base_url, params={**params, "api_key": self.api_key})
            data = response.json()
        except httpx.HTTPError as e:
            raise TransportError(
                f"SerpAPI リクエストに失敗しました: {str(e)}",
                details={"engine": engine},
                original_error=e,
            ) from e
        except ValueError as e:
            # JSON 以外のボディ
            raise TransportError(
                f"SerpAPI HTTP エラー: {response.status_code}",
                details={"engine": engine, "status_code": response.status_code},
                original_error=e,
            ) from e

        if not isinstance(data, dict):
            raise TransportError(
                "SerpAPI から不正なレスポンスを受信しました",
                details={"engine": engine, "status_code": response.status_code},
            )

        # エラーボディ付きの非 2xx はプロバイダーエラーとして呼び出し元で扱う
        if response.status_code != 200 and not data.get("error"):
            raise TransportError(
                f"SerpAPI HTTP エラー: {response.status_code}",
                details={"engine": engine, "status_code": response.status_code},
            )

        logger.debug(f"SerpAPI response keys: {list(data.keys())}", extra={"engine": engine})
        return data
