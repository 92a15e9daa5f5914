"""News data passed between providers, the fetch chain and agent tools"""

from datetime import datetime, timezone
from typing import List, Optional

from ..core.schemas import CamelModel


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class NewsArticle(CamelModel):
    """Standardized article shape shared by all providers"""
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    source: str
    published_at: str
    author: Optional[str] = None


class FetchResult(CamelModel):
    articles: List[NewsArticle] = []
    total_results: int = 0
    query: str

    @classmethod
    def empty(cls, query: str) -> "FetchResult":
        return cls(articles=[], total_results=0, query=query)


class FullContentResult(CamelModel):
    """Full page text extracted for a single article URL"""
    title: str = ""
    content: str = ""
    url: str
    success: bool
    error: Optional[str] = None
