"""
News fetch chain - tries providers strictly in priority order.

The first provider that reports a structurally successful response wins, even
with zero articles. Provider failures never reach the caller; if every tier
fails the empty result shape is returned.
"""

from typing import List, Optional

import structlog

from ..config import Settings
from .models import FetchResult
from .sources.base import NewsProvider
from .sources.gnews import GNewsProvider
from .sources.google_news_rss import GoogleNewsRssProvider
from .sources.newsapi import NewsApiProvider

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ARTICLES = 5


class NewsFetchChain:

    def __init__(self, providers: List[NewsProvider]):
        self.providers = providers

    @classmethod
    def from_settings(cls, settings: Settings) -> "NewsFetchChain":
        timeout = settings.news_request_timeout_seconds
        return cls([
            NewsApiProvider(api_key=settings.newsapi_key, timeout=timeout),
            GNewsProvider(api_key=settings.gnews_key, timeout=timeout),
            GoogleNewsRssProvider(timeout=timeout),
        ])

    def available_providers(self) -> List[str]:
        return [p.name for p in self.providers if p.is_available()]

    async def fetch_articles(self, topic: str, max_articles: Optional[int] = None) -> FetchResult:
        if max_articles is None:
            max_articles = DEFAULT_MAX_ARTICLES

        for provider in self.providers:
            if not provider.is_available():
                logger.debug("news_provider_skipped", provider=provider.name, reason="no credential")
                continue

            result = await provider.fetch(topic, max_articles)
            if result.success:
                return result.value

        logger.warning("news_fetch_exhausted", topic=topic, providers=[p.name for p in self.providers])
        return FetchResult.empty(topic)
