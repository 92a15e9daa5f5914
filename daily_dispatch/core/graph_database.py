import asyncio
from typing import Awaitable, Callable, Optional

import structlog
from neo4j import AsyncDriver, AsyncGraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from ..config import Settings
from ..exceptions import GraphConnectionError

logger = structlog.get_logger(__name__)


class GraphDatabase:
    """Owns the Memgraph driver for one application context."""

    def __init__(
        self,
        uri: str,
        username: str = "",
        password: str = "",
        retries: int = 5,
        retry_delay_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.uri = uri
        self.username = username
        self.password = password
        self.retries = max(retries, 1)
        self.retry_delay_seconds = retry_delay_seconds
        self._sleep = sleep
        self._driver: Optional[AsyncDriver] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphDatabase":
        return cls(
            uri=settings.memgraph_uri,
            username=settings.memgraph_username,
            password=settings.memgraph_password,
            retries=settings.memgraph_connect_retries,
            retry_delay_seconds=settings.memgraph_retry_delay_seconds,
        )

    @property
    def is_connected(self) -> bool:
        return self._driver is not None

    @property
    def driver(self) -> AsyncDriver:
        if self._driver is None:
            raise GraphConnectionError("Graph database is not connected")
        return self._driver

    def _create_driver(self) -> AsyncDriver:
        return AsyncGraphDatabase.driver(self.uri, auth=(self.username, self.password))

    async def connect(self) -> AsyncDriver:
        logger.info("graph_connecting", uri=self.uri, username=self.username or "(empty)")

        for attempt in range(1, self.retries + 1):
            driver = None
            try:
                driver = self._create_driver()
                await driver.verify_connectivity()
                self._driver = driver
                logger.info("graph_connected", uri=self.uri, attempt=attempt)
                return driver
            except (DriverError, Neo4jError, OSError, ValueError) as e:
                logger.error("graph_connect_attempt_failed", attempt=attempt, retries=self.retries, error=str(e))
                if driver is not None:
                    await driver.close()
                if attempt < self.retries:
                    logger.info("graph_connect_retrying", delay_seconds=self.retry_delay_seconds)
                    await self._sleep(self.retry_delay_seconds)

        raise GraphConnectionError(f"Failed to connect to Memgraph after {self.retries} attempts.")

    async def ensure_connected(self) -> AsyncDriver:
        if self._driver is None:
            return await self.connect()
        return self._driver

    async def close(self) -> None:
        if self._driver is not None:
            await self._driver.close()
            self._driver = None
            logger.info("graph_connection_closed")
