"""Application context: every long-lived service, built once and closed once."""

from dataclasses import dataclass
from typing import Optional

import structlog

from ..config import Settings, get_settings
from ..news.content_fetcher import ArticleContentFetcher
from ..news.fetch_chain import NewsFetchChain
from ..repositories.lesson_repository import LessonRepository
from ..scheduler.jobs import LessonJob
from ..scheduler.lesson_scheduler import LessonScheduler, SchedulerState
from ..services.cache_service import CacheService
from ..services.dispatch_service import DispatchService
from ..services.token_ledger import TokenRevocationLedger
from .cache import InMemoryCacheStore
from .graph_database import GraphDatabase

logger = structlog.get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    cache: CacheService
    graph: GraphDatabase
    chain: NewsFetchChain
    content_fetcher: ArticleContentFetcher
    dispatch_service: DispatchService
    repository: LessonRepository
    token_ledger: TokenRevocationLedger
    scheduler: LessonScheduler

    async def close(self) -> None:
        if self.scheduler.state is not SchedulerState.IDLE:
            self.scheduler.stop()
        await self.graph.close()
        await self.cache.close()
        logger.info("app_context_closed")


async def build_context(settings: Optional[Settings] = None) -> AppContext:
    settings = settings or get_settings()

    cache = CacheService(
        InMemoryCacheStore(list_ttl_seconds=settings.cache_list_ttl_seconds),
        history_limit=settings.cache_history_limit,
    )
    await cache.connect()

    graph = GraphDatabase.from_settings(settings)
    chain = NewsFetchChain.from_settings(settings)
    content_fetcher = ArticleContentFetcher(
        timeout=settings.news_request_timeout_seconds,
        max_content_length=settings.article_content_max_chars,
    )
    dispatch_service = DispatchService.from_settings(
        settings,
        cache=cache,
        chain=chain,
        content_fetcher=content_fetcher,
    )
    repository = LessonRepository(graph)
    job = LessonJob(dispatch_service, repository)

    logger.info(
        "app_context_ready",
        news_providers=chain.available_providers(),
        memgraph_uri=settings.memgraph_uri,
    )

    return AppContext(
        settings=settings,
        cache=cache,
        graph=graph,
        chain=chain,
        content_fetcher=content_fetcher,
        dispatch_service=dispatch_service,
        repository=repository,
        token_ledger=TokenRevocationLedger(cache),
        scheduler=LessonScheduler.from_settings(settings, job, graph),
    )
