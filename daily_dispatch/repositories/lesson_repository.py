import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog
from neo4j.exceptions import DriverError, Neo4jError
from pydantic import ValidationError as PydanticValidationError

from ..core.graph_database import GraphDatabase
from ..exceptions import DatabaseError
from ..lessons.schemas import LessonOutput, LessonSearchParams, LessonStats, StoredLesson

logger = structlog.get_logger(__name__)

NODE_LABEL = "DispatchArticle"
JSON_FIELDS = ("warmUpQuestions", "vocabulary", "articleContent", "discussionA", "discussionB")
RECENT_WINDOW = timedelta(days=7)

CREATE_LESSON = f"""
CREATE (a:{NODE_LABEL} {{
    id: $id,
    title: $title,
    postedDate: $postedDate,
    category: $category,
    topic: $topic,
    warmUpQuestions: $warmUpQuestions,
    vocabulary: $vocabulary,
    articleContent: $articleContent,
    summaryQuestion: $summaryQuestion,
    discussionA: $discussionA,
    discussionB: $discussionB,
    createdAt: $createdAt,
    updatedAt: $updatedAt
}})
RETURN a
"""

MATCH_BY_ID = f"MATCH (a:{NODE_LABEL} {{id: $lessonId}}) RETURN a"

DELETE_BY_ID = f"""
MATCH (a:{NODE_LABEL} {{id: $lessonId}})
WITH a, a.id AS lessonId
DETACH DELETE a
RETURN count(lessonId) AS deleted
"""

SEARCH = f"""
MATCH (a:{NODE_LABEL})
WHERE a.title CONTAINS $searchTerm
   OR a.topic CONTAINS $searchTerm
   OR a.category CONTAINS $searchTerm
RETURN a
ORDER BY a.createdAt DESC
LIMIT $limit
"""

COUNT_ALL = f"MATCH (a:{NODE_LABEL}) RETURN count(a) AS total"
COUNT_BY_CATEGORY = f"""
MATCH (a:{NODE_LABEL})
RETURN a.category AS category, count(a) AS count
ORDER BY count DESC
"""
COUNT_SINCE = f"MATCH (a:{NODE_LABEL}) WHERE a.createdAt >= $since RETURN count(a) AS recent"


def utc_iso(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def node_to_lesson(node: Dict[str, Any]) -> StoredLesson:
    data = dict(node)
    for field in JSON_FIELDS:
        if isinstance(data.get(field), str):
            data[field] = json.loads(data[field])
    return StoredLesson.model_validate(data)


def build_lessons_query(params: LessonSearchParams):
    conditions = []
    query_params: Dict[str, Any] = {"limit": params.limit, "offset": params.offset}

    if params.category:
        conditions.append("a.category = $category")
        query_params["category"] = params.category
    if params.topic:
        conditions.append("a.topic CONTAINS $topic")
        query_params["topic"] = params.topic
    if params.start_date:
        conditions.append("a.createdAt >= $startDate")
        query_params["startDate"] = params.start_date
    if params.end_date:
        conditions.append("a.createdAt <= $endDate")
        query_params["endDate"] = params.end_date

    where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    query = f"""
MATCH (a:{NODE_LABEL})
{where_clause}
RETURN a
ORDER BY a.createdAt DESC
SKIP $offset
LIMIT $limit
"""
    return query, query_params


class LessonRepository:
    """Lessons stored as single DispatchArticle nodes with JSON-encoded nested fields."""

    def __init__(self, graph: GraphDatabase):
        self.graph = graph

    async def _run(self, operation: str, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        try:
            driver = await self.graph.ensure_connected()
            async with driver.session() as session:
                result = await session.run(query, params or {})
                return await result.data()
        except DatabaseError:
            raise
        except (Neo4jError, DriverError, OSError) as e:
            logger.error("lesson_repository_error", operation=operation, error=str(e))
            raise DatabaseError(f"Failed to {operation}: {e}")

    def _to_lessons(self, operation: str, records: List[Dict[str, Any]]) -> List[StoredLesson]:
        try:
            return [node_to_lesson(record["a"]) for record in records]
        except (ValueError, PydanticValidationError) as e:
            logger.error("lesson_repository_decode_failed", operation=operation, error=str(e))
            raise DatabaseError(f"Failed to {operation}: stored lesson is malformed")

    async def save_lesson(self, lesson: LessonOutput, topic: str) -> StoredLesson:
        lesson_id = str(uuid.uuid4())
        now = utc_iso(datetime.now(timezone.utc))
        wire = lesson.to_wire()

        params = {
            "id": lesson_id,
            "title": wire["title"],
            "postedDate": wire["postedDate"],
            "category": wire["category"],
            "topic": topic,
            "summaryQuestion": wire["summaryQuestion"],
            "createdAt": now,
            "updatedAt": now,
        }
        for field in JSON_FIELDS:
            params[field] = json.dumps(wire[field])

        await self._run("save lesson", CREATE_LESSON, params)
        logger.info("lesson_saved", lesson_id=lesson_id, topic=topic)

        return StoredLesson(
            **lesson.model_dump(),
            id=lesson_id,
            topic=topic,
            created_at=now,
            updated_at=now,
        )

    async def get_lesson_by_id(self, lesson_id: str) -> Optional[StoredLesson]:
        records = await self._run("get lesson", MATCH_BY_ID, {"lessonId": lesson_id})
        if not records:
            return None
        return self._to_lessons("get lesson", records[:1])[0]

    async def get_lessons(self, params: Optional[LessonSearchParams] = None) -> List[StoredLesson]:
        query, query_params = build_lessons_query(params or LessonSearchParams())
        records = await self._run("list lessons", query, query_params)
        return self._to_lessons("list lessons", records)

    async def get_lessons_by_category(self, category: str, limit: int = 20) -> List[StoredLesson]:
        return await self.get_lessons(LessonSearchParams(category=category, limit=limit))

    async def get_recent_lessons(self, limit: int = 10) -> List[StoredLesson]:
        return await self.get_lessons(LessonSearchParams(limit=limit))

    async def delete_lesson(self, lesson_id: str) -> bool:
        records = await self._run("delete lesson", DELETE_BY_ID, {"lessonId": lesson_id})
        deleted = bool(records) and records[0].get("deleted", 0) > 0
        if deleted:
            logger.info("lesson_deleted", lesson_id=lesson_id)
        return deleted

    async def search_lessons(self, search_term: str, limit: int = 20) -> List[StoredLesson]:
        records = await self._run("search lessons", SEARCH, {"searchTerm": search_term, "limit": limit})
        return self._to_lessons("search lessons", records)

    async def get_lesson_stats(self) -> LessonStats:
        total = await self._run("count lessons", COUNT_ALL)
        by_category = await self._run("count lessons by category", COUNT_BY_CATEGORY)
        since = utc_iso(datetime.now(timezone.utc) - RECENT_WINDOW)
        recent = await self._run("count recent lessons", COUNT_SINCE, {"since": since})

        return LessonStats(
            total_lessons=total[0]["total"] if total else 0,
            category_counts={record["category"]: record["count"] for record in by_category},
            recent_lessons=recent[0]["recent"] if recent else 0,
        )
