"""
User endpoints - public reputation profiles and received reviews.
Accounts and tokens come from the auth service; nothing here writes users.
"""

from fastapi import APIRouter, Query

from app.config import get_settings
from app.core.dependencies import CurrentUserId, UserServiceDep
from app.schemas.user import ReviewPage, UserProfileResponse

router = APIRouter()
settings = get_settings()


@router.get("/me", response_model=UserProfileResponse)
async def me(svc: UserServiceDep, user_id: CurrentUserId):
    return await svc.get_profile(user_id, use_cache=False)


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_profile(svc: UserServiceDep, user_id: int):
    """Trust score, average rating and activity counters. Cached in Redis."""
    return await svc.get_profile(user_id)


@router.get("/{user_id}/reviews", response_model=ReviewPage)
async def get_reviews(
    svc: UserServiceDep,
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await svc.list_reviews(user_id, page=page, limit=limit)
