from fastapi import APIRouter

from .endpoints import lessons

api_router = APIRouter()

api_router.include_router(lessons.router, prefix="/lessons", tags=["lessons"])
