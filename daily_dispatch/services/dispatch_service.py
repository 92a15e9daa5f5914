"""
Dispatch Service
Turns news topics into lessons, articles and summaries through the agents:
1. The agent gathers news via the fetch chain tools
2. The agent writes original content
3. Text generations are cached; structured lessons are returned as models
"""

from datetime import datetime, timezone
from typing import AsyncIterator, Dict, List, Optional

import openai
import structlog

from ..agents.agent import NewsAgent
from ..agents.prompts import (
    LESSON_GENERATOR_INSTRUCTIONS,
    NEWS_ARTICLE_WRITER_INSTRUCTIONS,
    NEWS_SUMMARIZER_INSTRUCTIONS,
)
from ..agents.tools import build_news_tools
from ..config import Settings
from ..exceptions import LLMServiceError
from ..lessons.schemas import DispatchConfig, DispatchResult, LessonOutput, StructuredArticle
from ..news.content_fetcher import ArticleContentFetcher
from ..news.fetch_chain import NewsFetchChain
from .cache_service import CacheService

logger = structlog.get_logger(__name__)

LESSON_GENERATOR = "lesson-generator"
NEWS_ARTICLE_WRITER = "news-article-writer"
NEWS_SUMMARIZER = "news-summarizer"

LESSON_PROMPT = """Create a complete educational English lesson about the following news topic: "{topic}"

First, use the fetch_news tool to gather current news about this topic.
Then create an original, educational lesson following the structured format.

Remember:
- The article must be ORIGINAL (not copied from sources)
- Include exactly 5 vocabulary words with pronunciations
- Include 2-3 warm-up questions
- Include comprehension questions within the article
- Include discussion questions for two topics"""

DAILY_ARTICLE_PROMPT = "Write a comprehensive article about the latest developments in: {topic}"


class DispatchService:

    def __init__(
        self,
        agents: Dict[str, NewsAgent],
        cache: Optional[CacheService] = None,
        cache_ttl_seconds: int = 3600,
    ):
        self.agents = agents
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: Optional[CacheService] = None,
        chain: Optional[NewsFetchChain] = None,
        content_fetcher: Optional[ArticleContentFetcher] = None,
        client: Optional[openai.AsyncOpenAI] = None,
    ) -> "DispatchService":
        if not settings.openai_api_key and client is None:
            logger.warning("openai_key_missing", detail="generation calls will fail until OPENAI_API_KEY is set")

        client = client or openai.AsyncOpenAI(api_key=settings.openai_api_key or "")
        chain = chain or NewsFetchChain.from_settings(settings)
        content_fetcher = content_fetcher or ArticleContentFetcher(
            timeout=settings.news_request_timeout_seconds,
            max_content_length=settings.article_content_max_chars,
        )
        tools = build_news_tools(chain, content_fetcher)

        agents = {
            LESSON_GENERATOR: NewsAgent(
                name=LESSON_GENERATOR,
                instructions=LESSON_GENERATOR_INSTRUCTIONS,
                model=settings.openai_model_name,
                client=client,
                tools=tools,
                max_steps=settings.agent_max_steps,
            ),
            NEWS_ARTICLE_WRITER: NewsAgent(
                name=NEWS_ARTICLE_WRITER,
                instructions=NEWS_ARTICLE_WRITER_INSTRUCTIONS,
                model=settings.openai_model_name,
                client=client,
                tools=tools,
                max_steps=settings.agent_max_steps,
            ),
            NEWS_SUMMARIZER: NewsAgent(
                name=NEWS_SUMMARIZER,
                instructions=NEWS_SUMMARIZER_INSTRUCTIONS,
                model=settings.openai_summary_model_name,
                client=client,
                tools={"fetch_news": tools["fetch_news"]},
                max_steps=settings.agent_max_steps,
            ),
        }
        return cls(agents, cache=cache, cache_ttl_seconds=settings.generation_cache_ttl_seconds)

    def get_agent(self, name: str) -> NewsAgent:
        agent = self.agents.get(name)
        if agent is None:
            raise LLMServiceError(f"Agent not registered: {name}")
        return agent

    async def _cached_text(self, kind: str, topic: str, produce) -> str:
        if self.cache is None:
            return await produce()
        key = f"dispatch:{kind}:{topic.strip().lower()}"
        return await self.cache.get_or_set(key, self.cache_ttl_seconds, produce)

    async def generate_lesson(self, topic: str) -> LessonOutput:
        """
        Generate a structured English lesson for a news topic.

        Args:
            topic: Free-text news topic the agent researches with its tools

        Returns:
            Validated lesson model (exactly five vocabulary items, 7-8 paragraphs)
        """
        agent = self.get_agent(LESSON_GENERATOR)
        return await agent.generate(LESSON_PROMPT.format(topic=topic), response_model=LessonOutput)

    async def generate_lesson_json(self, topic: str) -> str:
        lesson = await self.generate_lesson(topic)
        return lesson.model_dump_json(by_alias=True, indent=2)

    async def generate_article(self, topic: str) -> str:
        """In-depth article text, cached per normalised topic."""
        agent = self.get_agent(NEWS_ARTICLE_WRITER)
        return await self._cached_text(
            "article",
            topic,
            lambda: agent.generate(f"Write an in-depth article about: {topic}")
        )

    async def generate_summary(self, topic: str) -> str:
        agent = self.get_agent(NEWS_SUMMARIZER)
        return await self._cached_text(
            "summary",
            topic,
            lambda: agent.generate(f"Give me a summary of the latest news about: {topic}")
        )

    async def generate_structured_article(self, topic: str) -> StructuredArticle:
        agent = self.get_agent(NEWS_ARTICLE_WRITER)
        return await agent.generate(
            f"Write an article about the latest news on: {topic}",
            response_model=StructuredArticle
        )

    async def stream_article_generation(self, topic: str) -> AsyncIterator[str]:
        agent = self.get_agent(NEWS_ARTICLE_WRITER)
        async for chunk in agent.stream(f"Write a news article about: {topic}"):
            yield chunk

    async def _daily_content(self, topic: str, output_format: str) -> str:
        if output_format == "summary":
            return await self.generate_summary(topic)
        if output_format == "structured":
            article = await self.generate_structured_article(topic)
            return article.model_dump_json(by_alias=True, indent=2)

        agent = self.get_agent(NEWS_ARTICLE_WRITER)
        return await agent.generate(DAILY_ARTICLE_PROMPT.format(topic=topic))

    async def generate_daily_dispatch(self, config: DispatchConfig) -> List[DispatchResult]:
        """
        Generate content for every configured topic.

        Args:
            config: Topics and output format. ``summary`` is cached, ``structured``
                returns the article model as camelCase JSON, ``article`` asks the
                writer for a fresh long-form piece.

        Returns:
            One result per topic, in order; a failed topic does not stop the others.
        """
        results = []

        for topic in config.topics:
            try:
                content = await self._daily_content(topic, config.output_format)
                results.append(DispatchResult(
                    topic=topic,
                    content=content,
                    generated_at=datetime.now(timezone.utc),
                    success=True,
                ))
            except Exception as e:
                logger.error("dispatch_topic_failed", topic=topic, error=str(e))
                results.append(DispatchResult(
                    topic=topic,
                    content="",
                    generated_at=datetime.now(timezone.utc),
                    success=False,
                    error=str(e) or "Unknown error",
                ))

        return results
