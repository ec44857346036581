"""
Food listing endpoints - RESTful resource (GET/POST/PUT).
Challenge: Pagination, auth, validation, 404 handling.
Design: Thin controller; service layer holds business logic.
"""

from fastapi import APIRouter, Query, status

from app.config import get_settings
from app.core.dependencies import CurrentUserId, FoodServiceDep
from app.db.models.food_item import FoodCategory
from app.schemas.food import FoodItemCreate, FoodItemResponse, FoodItemUpdate

router = APIRouter()
settings = get_settings()


@router.get("", response_model=list[FoodItemResponse])
async def list_food_items(
    svc: FoodServiceDep,
    category: FoodCategory | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
):
    """Claimable listings. REST: GET /food-items?category=meal&skip=0&limit=20."""
    return await svc.list_available(category=category, skip=skip, limit=limit)


@router.get("/mine", response_model=list[FoodItemResponse])
async def my_food_items(svc: FoodServiceDep, user_id: CurrentUserId):
    """All of the caller's listings, any status."""
    return await svc.list_mine(user_id)


@router.get("/{item_id}", response_model=FoodItemResponse)
async def get_food_item(svc: FoodServiceDep, item_id: int):
    return await svc.get(item_id)


@router.post("", response_model=FoodItemResponse, status_code=status.HTTP_201_CREATED)
async def create_food_item(svc: FoodServiceDep, user_id: CurrentUserId, data: FoodItemCreate):
    """Create a listing owned by the caller. Indexing happens in the worker."""
    return await svc.create(user_id, data)


@router.put("/{item_id}", response_model=FoodItemResponse)
async def update_food_item(
    svc: FoodServiceDep, user_id: CurrentUserId, item_id: int, data: FoodItemUpdate
):
    """Owner edits while the listing is still available."""
    return await svc.update(item_id, user_id, data)
