"""
API Router Module - Aggregates all endpoint routers
"""
from fastapi import APIRouter

from app.api.endpoints import categories, health, movies

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["Health"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(movies.router, prefix="/movies", tags=["Movies"])
