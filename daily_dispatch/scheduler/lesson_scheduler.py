"""
Daily lesson scheduler.

One single-shot timer is armed at a time. When it fires the job runs, and the
next timer is armed only after the job finishes, so runs never overlap. Runs
missed while the process was down are not backfilled.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

import structlog

from ..config import Settings
from ..core.graph_database import GraphDatabase
from ..exceptions import DatabaseError
from ..lessons.schemas import StoredLesson
from .jobs import LessonJob
from .timing import (
    PHT_OFFSET,
    SCHEDULED_HOUR,
    SCHEDULED_MINUTE,
    fixed_offset,
    format_time,
    milliseconds_until_next_run,
    utc_now,
)

logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    RUNNING = "running"


class LessonScheduler:

    def __init__(
        self,
        job: LessonJob,
        graph: GraphDatabase,
        hour: int = SCHEDULED_HOUR,
        minute: int = SCHEDULED_MINUTE,
        offset: timezone = PHT_OFFSET,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.job = job
        self.graph = graph
        self.hour = hour
        self.minute = minute
        self.offset = offset
        self.clock = clock

        self.state = SchedulerState.IDLE
        self.is_running = False
        self.next_run: Optional[datetime] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._stopped = True
        self._closed = asyncio.Event()

    @classmethod
    def from_settings(cls, settings: Settings, job: LessonJob, graph: GraphDatabase) -> "LessonScheduler":
        return cls(
            job,
            graph,
            hour=settings.schedule_hour,
            minute=settings.schedule_minute,
            offset=fixed_offset(settings.schedule_utc_offset_hours),
        )

    async def _connect_graph(self) -> None:
        try:
            await self.graph.connect()
        except DatabaseError as e:
            logger.warning("scheduler_graph_unavailable", error=str(e), detail="saving may fail")

    async def start(self) -> None:
        logger.info(
            "lesson_scheduler_started",
            utc_offset=str(self.offset),
            scheduled_time=f"{self.hour:02d}:{self.minute:02d}",
            current_time=format_time(self.clock(), self.offset),
        )
        self._stopped = False
        self._closed.clear()

        await self._connect_graph()
        self.schedule_next_run()

    def schedule_next_run(self) -> None:
        now = self.clock()
        delay_ms = milliseconds_until_next_run(now, self.hour, self.minute, self.offset)
        self.next_run = now + timedelta(milliseconds=delay_ms)

        logger.info(
            "next_run_scheduled",
            next_run=format_time(self.next_run, self.offset),
            in_minutes=round(delay_ms / 1000 / 60),
            in_hours=round(delay_ms / 1000 / 60 / 60),
        )

        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay_ms / 1000, self._on_timer)
        self.state = SchedulerState.ARMED

    def _on_timer(self) -> None:
        self._handle = None
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run_scheduled())

    async def _run_scheduled(self) -> None:
        self.is_running = True
        self.state = SchedulerState.RUNNING
        try:
            await self.job.run()
        except Exception as e:
            logger.error("scheduled_job_failed", error=str(e))
        finally:
            self.is_running = False
            if self._stopped:
                self.state = SchedulerState.IDLE
            else:
                self.schedule_next_run()

    def stop(self) -> None:
        self._stopped = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.state = SchedulerState.IDLE
        self.next_run = None
        self._closed.set()
        logger.info("lesson_scheduler_stopped")

    async def run_now(self) -> StoredLesson:
        logger.info("manual_run_triggered")
        await self._connect_graph()
        return await self.job.run()

    @property
    def running_task(self) -> Optional[asyncio.Task]:
        return self._task

    async def wait_closed(self) -> None:
        await self._closed.wait()
