"""User request/response schemas - public reputation profile."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class UserSummary(BaseModel):
    """Embedded in swaps and reviews."""

    id: int
    full_name: str
    trust_score: int

    model_config = {"from_attributes": True}


class UserReputation(BaseModel):
    """The cacheable part of a profile; changes only with the ledger counters."""

    id: int
    email: EmailStr
    full_name: str
    trust_score: int
    avg_rating: float
    rating_count: int
    items_shared: int
    items_received: int
    created_at: datetime | None = None


class UserProfileResponse(UserReputation):
    food_items_count: int
    active_listings_count: int


class ReviewResponse(BaseModel):
    swap_id: int
    rating: int
    review: str | None = None
    reviewer: UserSummary
    food_item_title: str
    # True when the profile owner was the provider on the reviewed swap
    is_provider: bool
    date: datetime | None = None


class ReviewPage(BaseModel):
    reviews: list[ReviewResponse]
    total: int
    total_pages: int
    current_page: int
