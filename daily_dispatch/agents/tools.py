"""
Tools exposed to the news agents.

Each tool pairs an OpenAI function schema (derived from a pydantic input
model) with an async handler. Handlers return JSON-ready dicts.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from pydantic import BaseModel, Field

from ..news.content_fetcher import ArticleContentFetcher
from ..news.fetch_chain import DEFAULT_MAX_ARTICLES, NewsFetchChain


class FetchNewsInput(BaseModel):
    topic: str = Field(description="The topic or keyword to search news for")
    max_articles: int = Field(
        default=DEFAULT_MAX_ARTICLES,
        ge=1,
        le=50,
        description="Maximum number of articles to fetch (default: 5)"
    )


class FetchArticleContentInput(BaseModel):
    url: str = Field(description="The URL of the article to fetch")


@dataclass
class AgentTool:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[Any], Awaitable[Dict[str, Any]]]

    def to_openai(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_model.model_json_schema(),
            },
        }

    async def invoke(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        params = self.input_model.model_validate(arguments)
        return await self.handler(params)


def build_news_tools(chain: NewsFetchChain, content_fetcher: ArticleContentFetcher) -> Dict[str, AgentTool]:

    async def fetch_news(params: FetchNewsInput) -> Dict[str, Any]:
        result = await chain.fetch_articles(params.topic, params.max_articles)
        return result.to_wire()

    async def fetch_article_content(params: FetchArticleContentInput) -> Dict[str, Any]:
        result = await content_fetcher.fetch_full_content(params.url)
        return result.to_wire()

    tools: List[AgentTool] = [
        AgentTool(
            name="fetch_news",
            description=(
                "Fetches latest news articles from news sources based on a topic or keyword. "
                "Use this to gather news content for article creation."
            ),
            input_model=FetchNewsInput,
            handler=fetch_news,
        ),
        AgentTool(
            name="fetch_article_content",
            description=(
                "Fetches the full content of an article from its URL. Use this when you need "
                "more detailed content from a specific article."
            ),
            input_model=FetchArticleContentInput,
            handler=fetch_article_content,
        ),
    ]
    return {tool.name: tool for tool in tools}
