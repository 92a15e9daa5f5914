"""
Base class for news providers
Clean, simple interface that every tier of the fetch chain implements
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from ...core.results import OperationResult
from ...exceptions import NetworkError, ParsingError
from ..models import FetchResult, NewsArticle, utc_now_iso

logger = structlog.get_logger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class NewsProvider(ABC):
    """Base adapter for news providers"""

    def __init__(self, name: str, base_url: str, api_key: Optional[str] = None, timeout: float = 10.0):
        self.name = name
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout

    def is_available(self) -> bool:
        """Keyed providers are only tried when their credential is configured"""
        return True

    @abstractmethod
    async def _fetch(self, topic: str, max_articles: int) -> FetchResult:
        """Fetch and normalize; raise on any provider-level failure"""
        pass

    async def fetch(self, topic: str, max_articles: int) -> OperationResult[FetchResult]:
        try:
            result = await self._fetch(topic, max_articles)
        except Exception as e:
            logger.warning("news_provider_failed", provider=self.name, topic=topic, error=str(e))
            return OperationResult.fail(f"{self.name}: {e}")

        logger.info(
            "news_provider_succeeded",
            provider=self.name,
            topic=topic,
            articles=len(result.articles)
        )
        return OperationResult.ok(result)

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": BROWSER_USER_AGENT},
                follow_redirects=True,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response
        except httpx.TimeoutException:
            raise NetworkError("Request timed out")
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__)

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = await self._get(url, params)
        try:
            data = response.json()
        except ValueError as e:
            raise ParsingError(f"Invalid JSON from {self.name}: {e}")
        if not isinstance(data, dict):
            raise ParsingError(f"Unexpected payload from {self.name}")
        return data

    @staticmethod
    def normalize_article(raw: Dict[str, Any], include_author: bool = True) -> NewsArticle:
        source = raw.get("source")
        source_name = source.get("name") if isinstance(source, dict) else None

        return NewsArticle(
            title=raw.get("title") or "",
            description=raw.get("description") or None,
            content=raw.get("content") or None,
            url=raw.get("url") or "",
            source=source_name or "Unknown",
            published_at=raw.get("publishedAt") or utc_now_iso(),
            author=(raw.get("author") or None) if include_author else None,
        )
