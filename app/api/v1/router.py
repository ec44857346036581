"""
API v1 router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import food_items, health, search, swaps, users

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(food_items.router, prefix="/food-items", tags=["food-items"])
api_router.include_router(swaps.router, prefix="/swaps", tags=["swaps"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
