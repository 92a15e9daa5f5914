from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from ....exceptions import DatabaseError
from ....lessons.schemas import LessonSearchParams, LessonStats, StoredLesson
from ....repositories.lesson_repository import LessonRepository
from ...dependencies import get_lesson_repository

logger = structlog.get_logger(__name__)

router = APIRouter()


def _unavailable(e: DatabaseError) -> HTTPException:
    logger.error("lesson_store_unavailable", error=str(e))
    return HTTPException(status_code=503, detail="Lesson store is unavailable")


@router.get("", response_model=List[StoredLesson])
async def list_lessons(
    category: Optional[str] = Query(None, description="Exact category"),
    topic: Optional[str] = Query(None, description="Substring of the topic"),
    start_date: Optional[str] = Query(None, description="ISO timestamp lower bound on createdAt"),
    end_date: Optional[str] = Query(None, description="ISO timestamp upper bound on createdAt"),
    limit: int = Query(20, ge=1, le=100, description="Number of lessons (max 100)"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    repository: LessonRepository = Depends(get_lesson_repository)
):
    """Stored lessons, newest first"""
    params = LessonSearchParams(
        category=category,
        topic=topic,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    try:
        return await repository.get_lessons(params)
    except DatabaseError as e:
        raise _unavailable(e)


@router.get("/recent", response_model=List[StoredLesson])
async def recent_lessons(
    limit: int = Query(10, ge=1, le=100),
    repository: LessonRepository = Depends(get_lesson_repository)
):
    try:
        return await repository.get_recent_lessons(limit)
    except DatabaseError as e:
        raise _unavailable(e)


@router.get("/search", response_model=List[StoredLesson])
async def search_lessons(
    q: str = Query(..., min_length=1, description="Matched against title, topic and category"),
    limit: int = Query(20, ge=1, le=100),
    repository: LessonRepository = Depends(get_lesson_repository)
):
    try:
        return await repository.search_lessons(q, limit)
    except DatabaseError as e:
        raise _unavailable(e)


@router.get("/stats", response_model=LessonStats)
async def lesson_stats(repository: LessonRepository = Depends(get_lesson_repository)):
    try:
        return await repository.get_lesson_stats()
    except DatabaseError as e:
        raise _unavailable(e)


@router.get("/{lesson_id}", response_model=StoredLesson)
async def get_lesson(
    lesson_id: str,
    repository: LessonRepository = Depends(get_lesson_repository)
):
    try:
        lesson = await repository.get_lesson_by_id(lesson_id)
    except DatabaseError as e:
        raise _unavailable(e)

    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson
