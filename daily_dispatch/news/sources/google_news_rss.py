"""
Google News RSS adapter - keyless last tier of the fetch chain
"""

from typing import List, Optional

import feedparser

from ..models import FetchResult, NewsArticle, utc_now_iso
from .base import NewsProvider


class GoogleNewsRssProvider(NewsProvider):

    DEFAULT_SOURCE = "Google News"

    def __init__(self, timeout: float = 10.0):
        super().__init__("Google News RSS", "https://news.google.com", timeout=timeout)

    async def _fetch(self, topic: str, max_articles: int) -> FetchResult:
        response = await self._get(
            f"{self.base_url}/rss/search",
            params={"q": topic, "hl": "en-US", "gl": "US", "ceid": "US:en"},
        )
        articles = self.parse_feed(response.content, max_articles)
        return FetchResult(articles=articles, total_results=len(articles), query=topic)

    def parse_feed(self, document, max_articles: int) -> List[NewsArticle]:
        """Take up to ``max_articles`` usable items in document order"""
        feed = feedparser.parse(document)
        articles = []

        for entry in feed.entries:
            if len(articles) >= max_articles:
                break
            article = self._parse_entry(entry)
            if article:
                articles.append(article)

        return articles

    def _parse_entry(self, entry) -> Optional[NewsArticle]:
        title = (entry.get("title") or "").strip()
        url = (entry.get("link") or "").strip()
        if not title or not url:
            return None

        source = entry.get("source") or {}
        return NewsArticle(
            title=title,
            description=None,
            content=None,
            url=url,
            source=source.get("title") or self.DEFAULT_SOURCE,
            published_at=entry.get("published") or utc_now_iso(),
            author=None,
        )
