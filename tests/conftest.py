import pytest
from unittest.mock import MagicMock, AsyncMock

from daily_dispatch.config import Settings
from daily_dispatch.core.cache import InMemoryCacheStore
from daily_dispatch.lessons.schemas import LessonOutput, StoredLesson
from daily_dispatch.services.cache_service import CacheService


class FakeClock:
    """Epoch-millis clock that only moves when told to"""

    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += round(seconds * 1000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
async def cache_service(memory_store):
    service = CacheService(memory_store)
    await service.connect()
    yield service
    await service.close()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        newsapi_key="test-newsapi-key",
        gnews_key="test-gnews-key",
        openai_api_key="test-openai-key",
        memgraph_uri="bolt://localhost:7687",
        memgraph_connect_retries=2,
        memgraph_retry_delay_seconds=0,
    )


@pytest.fixture
def lesson_payload():
    paragraphs = [
        {"text": f"Paragraph {i} about the electric bus rollout.", "comprehensionQuestion": None}
        for i in range(1, 8)
    ]
    paragraphs[1]["comprehensionQuestion"] = {
        "question": "Which city bought the buses?",
        "answer": "Manila bought the buses."
    }
    return {
        "title": "Manila Rolls Out Electric Buses",
        "postedDate": "March 3, 2025",
        "category": "Environment",
        "warmUpQuestions": ["How do you get to work?", "Have you ridden an electric bus?"],
        "vocabulary": [
            {
                "word": word,
                "pronunciation": "/ˈwɜːd/ [WURD]",
                "partOfSpeech": "n.",
                "definition": f"Definition of {word}",
                "exampleSentence": f"An example with {word}.",
                "additionalInfo": None,
            }
            for word in ("fleet", "emission", "commuter", "subsidy", "grid")
        ],
        "articleContent": {
            "paragraphs": paragraphs,
            "source": "This article was provided by The Associated Press.",
        },
        "summaryQuestion": "What is the article mainly about?",
        "discussionA": {"topic": "Public transport", "questions": ["Q1?", "Q2?"]},
        "discussionB": {"topic": "Clean energy", "questions": ["Q3?", "Q4?", "Q5?"]},
    }


@pytest.fixture
def sample_lesson(lesson_payload):
    return LessonOutput.model_validate(lesson_payload)


@pytest.fixture
def stored_lesson(sample_lesson):
    return StoredLesson(
        **sample_lesson.model_dump(),
        id="lesson-1",
        topic="electric vehicles",
        created_at="2025-03-02T19:00:00.000Z",
        updated_at="2025-03-02T19:00:00.000Z",
    )


@pytest.fixture
def mock_dispatch_service(sample_lesson):
    service = MagicMock()
    service.generate_lesson = AsyncMock(return_value=sample_lesson)
    return service


@pytest.fixture
def mock_repository():
    repository = MagicMock()
    repository.save_lesson = AsyncMock()
    repository.get_lessons = AsyncMock(return_value=[])
    repository.get_recent_lessons = AsyncMock(return_value=[])
    repository.search_lessons = AsyncMock(return_value=[])
    repository.get_lesson_by_id = AsyncMock(return_value=None)
    repository.get_lesson_stats = AsyncMock()
    return repository


@pytest.fixture
def mock_graph():
    graph = MagicMock()
    graph.connect = AsyncMock()
    graph.close = AsyncMock()
    graph.is_connected = True
    return graph
