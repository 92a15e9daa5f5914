import pytest
from unittest.mock import AsyncMock

from daily_dispatch.exceptions import DatabaseError, LLMServiceError
from daily_dispatch.scheduler.jobs import LessonJob


class TestLessonJob:
    @pytest.mark.asyncio
    async def test_generates_and_saves(self, mock_dispatch_service, mock_repository, sample_lesson, stored_lesson):
        mock_repository.save_lesson = AsyncMock(return_value=stored_lesson)
        job = LessonJob(mock_dispatch_service, mock_repository, pick_topic=lambda: "electric vehicles")

        result = await job.run()

        assert result.id == "lesson-1"
        mock_dispatch_service.generate_lesson.assert_awaited_once_with("electric vehicles")
        mock_repository.save_lesson.assert_awaited_once_with(sample_lesson, "electric vehicles")

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self, mock_dispatch_service, mock_repository):
        mock_dispatch_service.generate_lesson = AsyncMock(side_effect=LLMServiceError("rate limit"))
        job = LessonJob(mock_dispatch_service, mock_repository, pick_topic=lambda: "ai")

        with pytest.raises(LLMServiceError):
            await job.run()

        mock_repository.save_lesson.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_failure_propagates(self, mock_dispatch_service, mock_repository):
        mock_repository.save_lesson = AsyncMock(side_effect=DatabaseError("Graph database is not connected"))
        job = LessonJob(mock_dispatch_service, mock_repository)

        with pytest.raises(DatabaseError):
            await job.run()
