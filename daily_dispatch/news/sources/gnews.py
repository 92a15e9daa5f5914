"""GNews adapter - second tier, requires GNEWS_KEY"""

from typing import Optional

from ...exceptions import NewsProviderError
from ..models import FetchResult
from .base import NewsProvider


class GNewsProvider(NewsProvider):

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        super().__init__("GNews", "https://gnews.io", api_key=api_key, timeout=timeout)

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def _fetch(self, topic: str, max_articles: int) -> FetchResult:
        data = await self._get_json(
            f"{self.base_url}/api/v4/search",
            params={"q": topic, "max": max_articles, "apikey": self.api_key},
        )

        # GNews has no status flag; a missing articles field means failure
        if data.get("articles") is None:
            raise NewsProviderError(f"no articles field (errors={data.get('errors')!r})")

        articles = [self.normalize_article(raw, include_author=False) for raw in data["articles"]]
        return FetchResult(
            articles=articles,
            total_results=data.get("totalArticles") or len(articles),
            query=topic,
        )
