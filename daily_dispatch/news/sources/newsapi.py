"""NewsAPI.org adapter - first tier, requires NEWSAPI_KEY"""

from typing import Optional

from ...exceptions import NewsProviderError
from ..models import FetchResult
from .base import NewsProvider


class NewsApiProvider(NewsProvider):

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        super().__init__("NewsAPI", "https://newsapi.org", api_key=api_key, timeout=timeout)

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def _fetch(self, topic: str, max_articles: int) -> FetchResult:
        data = await self._get_json(
            f"{self.base_url}/v2/everything",
            params={
                "q": topic,
                "sortBy": "publishedAt",
                "pageSize": max_articles,
                "apiKey": self.api_key,
            },
        )

        if data.get("status") != "ok":
            raise NewsProviderError(f"status={data.get('status')!r} message={data.get('message')!r}")

        articles = [self.normalize_article(raw) for raw in data.get("articles") or []]
        return FetchResult(
            articles=articles,
            total_results=data.get("totalResults") or len(articles),
            query=topic,
        )
