"""
Food item service - listing use cases (SOLID: Single Responsibility).
Challenge: Owners edit descriptive fields; status stays with the ledger and sweeper.
Design: Service depends on repositories; indexing is pushed to the queue.
"""

import logging
from datetime import datetime, timezone

from app.core.exceptions import (
    ForbiddenError,
    InputValidationError,
    ItemUnavailableError,
    NotFoundError,
)
from app.db.models.food_item import FoodCategory, FoodItem, FoodStatus
from app.db.repositories.food_item_repository import FoodItemRepository
from app.queue import tasks
from app.schemas.food import FoodItemCreate, FoodItemResponse, FoodItemUpdate

logger = logging.getLogger(__name__)

_DIETARY_FIELDS = ("vegetarian", "vegan", "gluten_free", "nut_free", "dairy_free")


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def food_to_doc(item: FoodItem) -> dict:
    """Convert ORM model to document for Elasticsearch."""
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description or "",
        "category": item.category.value,
        "status": item.status.value,
        "owner_id": item.owner_id,
        "price": item.price,
        "is_free": item.is_free,
        "address": item.address,
        "expires_at": item.expires_at.isoformat() if item.expires_at else None,
        "created_at": item.created_at.isoformat() if item.created_at else None,
    }


def food_to_response(item: FoodItem) -> FoodItemResponse:
    return FoodItemResponse(
        id=item.id,
        owner_id=item.owner_id,
        title=item.title,
        description=item.description,
        quantity=item.quantity,
        quantity_unit=item.quantity_unit,
        category=item.category,
        dietary={name: getattr(item, name) for name in _DIETARY_FIELDS},
        price=item.price,
        original_price=item.original_price,
        is_free=item.is_free,
        is_pickup_only=item.is_pickup_only,
        latitude=item.latitude,
        longitude=item.longitude,
        address=item.address,
        images=list(item.images or []),
        expires_at=item.expires_at,
        status=item.status,
        is_available=item.is_available,
        discount_percentage=item.discount_percentage,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class FoodItemService:
    """Listing CRUD for owners and public browsing."""

    def __init__(self, food_repo: FoodItemRepository):
        self.food_repo = food_repo

    async def create(self, owner_id: int, data: FoodItemCreate) -> FoodItemResponse:
        expires_at = as_utc(data.expires_at)
        if expires_at <= datetime.now(timezone.utc):
            raise InputValidationError("Expiration date must be in the future")
        item = FoodItem(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            quantity=data.quantity,
            quantity_unit=data.quantity_unit,
            category=data.category,
            price=data.price,
            original_price=data.original_price,
            # A priced listing is never free
            is_free=data.is_free and data.price == 0,
            is_pickup_only=data.is_pickup_only,
            expires_at=expires_at,
            latitude=data.latitude,
            longitude=data.longitude,
            address=data.address,
            images=list(data.images),
            status=FoodStatus.AVAILABLE,
            **data.dietary.model_dump(),
        )
        item = await self.food_repo.add(item)
        logger.info("Food item %s created by user %s", item.id, owner_id)
        tasks.enqueue_food_index(food_to_doc(item))
        return food_to_response(item)

    async def get(self, item_id: int) -> FoodItemResponse:
        item = await self.food_repo.get_by_id(item_id)
        if not item:
            raise NotFoundError("Food item not found")
        return food_to_response(item)

    async def list_available(
        self, *, category: FoodCategory | None = None, skip: int = 0, limit: int = 20
    ) -> list[FoodItemResponse]:
        items = await self.food_repo.list_available(category=category, skip=skip, limit=limit)
        return [food_to_response(i) for i in items]

    async def list_mine(self, owner_id: int) -> list[FoodItemResponse]:
        return [food_to_response(i) for i in await self.food_repo.list_by_owner(owner_id)]

    async def update(self, item_id: int, actor_id: int, data: FoodItemUpdate) -> FoodItemResponse:
        """Edit an available listing. Reserved/finished listings are frozen."""
        item = await self.food_repo.get_by_id(item_id)
        if not item:
            raise NotFoundError("Food item not found")
        if item.owner_id != actor_id:
            raise ForbiddenError("Only the owner can edit this food item")
        if item.status != FoodStatus.AVAILABLE:
            raise ItemUnavailableError(f"Cannot edit a food item that is {item.status.value}")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        dietary = changes.pop("dietary", None)
        if "expires_at" in changes:
            changes["expires_at"] = as_utc(changes["expires_at"])
            if changes["expires_at"] <= datetime.now(timezone.utc):
                raise InputValidationError("Expiration date must be in the future")
        for field, value in changes.items():
            setattr(item, field, value)
        if dietary:
            for field, value in dietary.items():
                setattr(item, field, value)
        if item.price > 0:
            item.is_free = False

        await self.food_repo.session.flush()
        await self.food_repo.session.refresh(item)
        tasks.enqueue_food_index(food_to_doc(item))
        return food_to_response(item)
