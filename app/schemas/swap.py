"""Swap request/response schemas - ledger API contract."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.db.models.swap import SwapStatus
from app.schemas.food import FoodItemSummary
from app.schemas.user import UserSummary


class SwapCreate(BaseModel):
    food_item_id: int
    message: str | None = Field(None, max_length=1000)
    offered_item_id: int | None = None
    is_swap: bool = False
    is_purchase: bool = False


class SwapStatusUpdate(BaseModel):
    status: SwapStatus


class SwapReviewCreate(BaseModel):
    # Out-of-range values are clamped to 1..5 by the service
    rating: int
    review: str | None = Field(None, max_length=2000)
    review_for: Literal["provider", "requester"]


class MessageCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    id: int
    content: str
    timestamp: datetime | None = None
    sender: UserSummary


class SwapResponse(BaseModel):
    id: int
    requester_id: int
    provider_id: int
    food_item_id: int
    offered_item_id: int | None = None
    message: str | None = None
    status: SwapStatus
    is_swap: bool
    is_purchase: bool
    amount: float
    requester_rating: int
    provider_rating: int
    requester_review: str | None = None
    provider_review: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    food_item: FoodItemSummary
    offered_item: FoodItemSummary | None = None
    requester: UserSummary
    provider: UserSummary
    messages: list[MessageResponse] = []


class SwapPage(BaseModel):
    swaps: list[SwapResponse]
    total: int
    total_pages: int
    current_page: int
