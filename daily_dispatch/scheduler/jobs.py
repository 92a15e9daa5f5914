import time
from typing import Callable

import structlog

from ..lessons.schemas import StoredLesson
from ..lessons.topics import get_random_news_topic
from ..repositories.lesson_repository import LessonRepository
from ..services.dispatch_service import DispatchService
from .timing import format_time, utc_now

logger = structlog.get_logger(__name__)


class LessonJob:
    """Generate one lesson on a random topic and store it."""

    def __init__(
        self,
        dispatch_service: DispatchService,
        repository: LessonRepository,
        pick_topic: Callable[[], str] = get_random_news_topic,
    ):
        self.dispatch_service = dispatch_service
        self.repository = repository
        self.pick_topic = pick_topic

    async def run(self) -> StoredLesson:
        start_time = time.perf_counter()
        topic = self.pick_topic()
        logger.info("lesson_job_started", topic=topic, local_time=format_time(utc_now()))

        try:
            lesson = await self.dispatch_service.generate_lesson(topic)
            logger.info("lesson_generated", title=lesson.title)

            stored = await self.repository.save_lesson(lesson, topic)
        except Exception as e:
            logger.error("lesson_job_failed", topic=topic, error=str(e))
            raise

        logger.info(
            "lesson_job_completed",
            lesson_id=stored.id,
            duration_seconds=round(time.perf_counter() - start_time, 2),
        )
        return stored
