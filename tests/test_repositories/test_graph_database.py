import pytest
from neo4j.exceptions import ServiceUnavailable
from unittest.mock import patch, MagicMock, AsyncMock

from daily_dispatch.core.graph_database import GraphDatabase
from daily_dispatch.exceptions import GraphConnectionError


def driver_mock(error=None):
    driver = MagicMock()
    driver.verify_connectivity = AsyncMock(side_effect=error)
    driver.close = AsyncMock()
    return driver


class TestGraphDatabase:
    @pytest.fixture(autouse=True)
    def setup_graph(self):
        self.sleep = AsyncMock()
        self.graph = GraphDatabase("bolt://memgraph:7687", "user", "secret", retries=3, retry_delay_seconds=2.0, sleep=self.sleep)

    @patch('daily_dispatch.core.graph_database.AsyncGraphDatabase')
    @pytest.mark.asyncio
    async def test_connect_first_try(self, mock_neo4j):
        driver = driver_mock()
        mock_neo4j.driver.return_value = driver

        assert await self.graph.connect() is driver

        assert self.graph.is_connected
        mock_neo4j.driver.assert_called_once_with("bolt://memgraph:7687", auth=("user", "secret"))
        self.sleep.assert_not_called()

    @patch('daily_dispatch.core.graph_database.AsyncGraphDatabase')
    @pytest.mark.asyncio
    async def test_connect_retries_with_fixed_delay(self, mock_neo4j):
        failing = driver_mock(ServiceUnavailable("not ready"))
        working = driver_mock()
        mock_neo4j.driver.side_effect = [failing, failing, working]

        assert await self.graph.connect() is working

        assert self.sleep.await_count == 2
        self.sleep.assert_awaited_with(2.0)
        assert failing.close.await_count == 2

    @patch('daily_dispatch.core.graph_database.AsyncGraphDatabase')
    @pytest.mark.asyncio
    async def test_connect_gives_up(self, mock_neo4j):
        mock_neo4j.driver.return_value = driver_mock(ServiceUnavailable("not ready"))

        with pytest.raises(GraphConnectionError, match="after 3 attempts"):
            await self.graph.connect()

        assert not self.graph.is_connected
        assert self.sleep.await_count == 2

    def test_driver_requires_connection(self):
        with pytest.raises(GraphConnectionError):
            self.graph.driver

    @patch('daily_dispatch.core.graph_database.AsyncGraphDatabase')
    @pytest.mark.asyncio
    async def test_ensure_connected_reuses_driver(self, mock_neo4j):
        mock_neo4j.driver.return_value = driver_mock()

        first = await self.graph.ensure_connected()
        second = await self.graph.ensure_connected()

        assert first is second
        mock_neo4j.driver.assert_called_once()

    @patch('daily_dispatch.core.graph_database.AsyncGraphDatabase')
    @pytest.mark.asyncio
    async def test_close(self, mock_neo4j):
        driver = driver_mock()
        mock_neo4j.driver.return_value = driver
        await self.graph.connect()

        await self.graph.close()

        driver.close.assert_awaited_once()
        assert not self.graph.is_connected

    def test_from_settings(self, test_settings):
        graph = GraphDatabase.from_settings(test_settings)

        assert graph.uri == "bolt://localhost:7687"
        assert graph.retries == 2
