from fastapi import Depends, Request

from ..core.context import AppContext
from ..repositories.lesson_repository import LessonRepository


def get_app_context(request: Request) -> AppContext:
    return request.app.state.context


def get_lesson_repository(context: AppContext = Depends(get_app_context)) -> LessonRepository:
    return context.repository
