from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends

from ....core.context import AppContext
from ...dependencies import get_app_context

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(context: AppContext = Depends(get_app_context)) -> Dict[str, Any]:
    graph_status = "connected" if context.graph.is_connected else "disconnected"
    cache_status = "connected" if context.cache.is_connected else "disconnected"

    return {
        "status": "healthy" if graph_status == "connected" else "degraded",
        "service": "Daily Dispatch API",
        "version": "0.1.0",
        "environment": "development" if context.settings.debug else "production",
        "graph": graph_status,
        "cache": cache_status,
        "scheduler": context.scheduler.state.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
