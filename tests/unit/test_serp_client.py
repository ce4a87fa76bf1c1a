"""
SerpAPI クライアントのユニットテスト
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from guide_services.config.settings import Settings
from guide_services.services.error_handler import (
    ErrorCode,
    MissingCredentialError,
    TransportError,
)
from guide_services.services.serp_client import SerpApiClient


@pytest.fixture
def serp_client(test_settings):
    """SerpAPI クライアントのフィクスチャ"""
    return SerpApiClient(test_settings)


def _mock_http(serp_client, status_code=200, json_data=None, json_error=None):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    if json_error:
        mock_response.json.side_effect = json_error
    else:
        mock_response.json.return_value = json_data

    mock_client = AsyncMock()
    mock_client.get = AsyncMock(return_value=mock_response)
    mock_client.is_closed = False
    serp_client._client = mock_client
    return mock_client


@pytest.mark.asyncio
async def test_search_success(serp_client):
    """検索が成功するケース"""
    mock_client = _mock_http(serp_client, json_data={"properties": [{"name": "A"}]})

    data = await serp_client.search({"engine": "google_hotels", "q": "Ella"})

    assert data == {"properties": [{"name": "A"}]}
    call_args = mock_client.get.call_args
    assert call_args[0][0] == "https://serpapi.com/search.json"
    assert call_args[1]["params"]["api_key"] == "test_api_key"
    assert call_args[1]["params"]["q"] == "Ella"


@pytest.mark.asyncio
async def test_search_without_api_key(tmp_path):
    """API キー未設定"""
    client = SerpApiClient(Settings(_env_file=None, serp_api_key="", data_dir=tmp_path))

    assert client.has_credentials is False
    with pytest.raises(MissingCredentialError) as exc_info:
        await client.search({"engine": "google_maps"})

    assert exc_info.value.code == ErrorCode.MISSING_CREDENTIAL


@pytest.mark.asyncio
async def test_search_returns_provider_error_body(serp_client):
    """エラーボディ付きの 401 はそのまま返す"""
    _mock_http(serp_client, status_code=401, json_data={"error": "Invalid API key."})

    data = await serp_client.search({"engine": "google_hotels"})

    assert data == {"error": "Invalid API key."}


@pytest.mark.asyncio
async def test_search_http_error_without_body(serp_client):
    """JSON でない 502 は通信エラー"""
    _mock_http(serp_client, status_code=502, json_error=ValueError("Expecting value"))

    with pytest.raises(TransportError) as exc_info:
        await serp_client.search({"engine": "google_hotels"})

    assert "502" in exc_info.value.message


@pytest.mark.asyncio
async def test_search_http_error_with_unrelated_body(serp_client):
    _mock_http(serp_client, status_code=500, json_data={"detail": "oops"})

    with pytest.raises(TransportError):
        await serp_client.search({"engine": "google_maps"})


@pytest.mark.asyncio
async def test_search_network_failure(serp_client):
    """ネットワークエラー"""
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(side_effect=httpx.ConnectError("Name or service not known"))
    mock_client.is_closed = False
    serp_client._client = mock_client

    with pytest.raises(TransportError) as exc_info:
        await serp_client.search({"engine": "google_hotels"})

    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_close_client(serp_client):
    """クライアントのクローズ"""
    mock_client = AsyncMock()
    mock_client.is_closed = False
    mock_client.aclose = AsyncMock()

    serp_client._client = mock_client

    await serp_client.close()

    mock_client.aclose.assert_called_once()
    assert serp_client._client is None
