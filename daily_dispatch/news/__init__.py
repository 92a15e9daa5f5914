from .content_fetcher import ArticleContentFetcher
from .fetch_chain import NewsFetchChain
from .models import FetchResult, FullContentResult, NewsArticle

__all__ = [
    "ArticleContentFetcher",
    "NewsFetchChain",
    "FetchResult",
    "FullContentResult",
    "NewsArticle",
]
