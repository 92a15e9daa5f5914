import httpx
import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from daily_dispatch.news.sources.base import NewsProvider
from daily_dispatch.news.sources.gnews import GNewsProvider
from daily_dispatch.news.sources.newsapi import NewsApiProvider


def json_response(payload):
    response = MagicMock()
    response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    return response


class TestNewsApiProvider:
    @pytest.fixture(autouse=True)
    def setup_provider(self):
        self.provider = NewsApiProvider(api_key="test-key", timeout=5)

    def test_requires_key(self):
        assert self.provider.is_available()
        assert not NewsApiProvider(api_key=None).is_available()

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_fetch_normalizes_articles(self, mock_client):
        get = AsyncMock(return_value=json_response({
            "status": "ok",
            "totalResults": 0,
            "articles": [{
                "title": "Chip exports rise",
                "description": None,
                "url": "https://example.com/chips",
                "author": "J. Doe",
                "source": {"id": None, "name": None},
            }],
        }))
        mock_client.return_value.__aenter__.return_value.get = get

        result = await self.provider.fetch("chips", 3)

        assert result.success
        article = result.value.articles[0]
        assert article.source == "Unknown"
        assert article.author == "J. Doe"
        assert article.published_at.endswith("Z")
        assert result.value.total_results == 1
        assert get.await_args.kwargs["params"] == {
            "q": "chips",
            "sortBy": "publishedAt",
            "pageSize": 3,
            "apiKey": "test-key",
        }

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_non_ok_status_is_failure(self, mock_client):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=json_response({"status": "error", "message": "apiKeyInvalid"})
        )

        result = await self.provider.fetch("chips", 3)

        assert not result.success
        assert "apiKeyInvalid" in result.error

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, mock_client):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            side_effect=httpx.TimeoutException("Request timeout")
        )

        result = await self.provider.fetch("chips", 3)

        assert not result.success
        assert "timed out" in result.error.lower()

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_http_error_is_failure(self, mock_client):
        mock_response = MagicMock()
        mock_response.status_code = 429
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            side_effect=httpx.HTTPStatusError("Too many", request=None, response=mock_response)
        )

        result = await self.provider.fetch("chips", 3)

        assert not result.success
        assert "429" in result.error

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_invalid_json_is_failure(self, mock_client):
        response = MagicMock()
        response.json = MagicMock(side_effect=ValueError("Expecting value"))
        response.raise_for_status = MagicMock()
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=response)

        result = await self.provider.fetch("chips", 3)

        assert not result.success
        assert "Invalid JSON" in result.error


class TestGNewsProvider:
    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_missing_articles_field_is_failure(self, mock_client):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=json_response({"errors": ["Your API key is invalid."]})
        )

        result = await GNewsProvider(api_key="k").fetch("ai", 5)

        assert not result.success

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_empty_articles_is_success(self, mock_client):
        get = AsyncMock(return_value=json_response({"totalArticles": 0, "articles": []}))
        mock_client.return_value.__aenter__.return_value.get = get

        result = await GNewsProvider(api_key="k").fetch("ai", 5)

        assert result.success
        assert result.value.articles == []
        assert get.await_args.kwargs["params"] == {"q": "ai", "max": 5, "apikey": "k"}


class TestNormalizeArticle:
    def test_defaults(self):
        article = NewsProvider.normalize_article({"title": "T", "url": "https://x"}, include_author=False)

        assert article.source == "Unknown"
        assert article.description is None
        assert article.author is None

    def test_wire_format_is_camel_case(self):
        article = NewsProvider.normalize_article({
            "title": "T",
            "url": "https://x",
            "publishedAt": "2025-01-01T00:00:00Z",
            "source": {"name": "Wire"},
        })

        wire = article.to_wire()
        assert wire["publishedAt"] == "2025-01-01T00:00:00Z"
        assert wire["source"] == "Wire"
