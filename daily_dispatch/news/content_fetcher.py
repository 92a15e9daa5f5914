"""
Article content fetcher
Pulls a page and reduces it to readable text for the generation agents.
"""

import httpx
import structlog
from bs4 import BeautifulSoup

from ..exceptions import NetworkError
from ..utils.string_utils import clean_text, truncate_text
from ..utils.url_utils import extract_domain, validate_url
from .models import FullContentResult
from .sources.base import BROWSER_USER_AGENT

logger = structlog.get_logger(__name__)

STRIPPED_TAGS = ["script", "style", "nav", "header", "footer", "aside"]


class ArticleContentFetcher:
    MAX_CONTENT_LENGTH = 5000

    def __init__(self, timeout: float = 10.0, max_content_length: int = MAX_CONTENT_LENGTH):
        self.timeout = timeout
        self.max_content_length = max_content_length

    async def fetch_full_content(self, url: str) -> FullContentResult:
        """Never raises; failures come back as ``success=False`` with a message."""
        try:
            validate_url(url)
            html = await self._download(url)
            title, content = self.extract_text(html)
        except Exception as e:
            logger.warning("article_content_failed", url=url, error=str(e))
            return FullContentResult(url=url, success=False, error=str(e) or "Failed to fetch article")

        logger.info("article_content_fetched", domain=extract_domain(url), content_length=len(content))
        return FullContentResult(title=title, content=content, url=url, success=True)

    async def _download(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": BROWSER_USER_AGENT},
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.TimeoutException:
            raise NetworkError("Request timed out")
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or "Failed to fetch article")

    def extract_text(self, html: str) -> tuple:
        soup = BeautifulSoup(html, "html.parser")

        title = soup.title.get_text(strip=True) if soup.title else ""

        for element in soup(STRIPPED_TAGS):
            element.decompose()

        root = soup.find("article") or soup
        content = clean_text(root.get_text(separator=" "))
        return title, truncate_text(content, self.max_content_length)
