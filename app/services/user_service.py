"""
User service - public reputation profile and received reviews.
Challenge: Profiles are read far more often than ratings change; cache them in
Redis and drop the entry whenever the ledger touches the user's counters.
"""

import json
import math

from app.cache.redis_client import cache_get, cache_set, profile_key
from app.config import get_settings
from app.core.exceptions import NotFoundError
from app.db.models.food_item import FoodStatus
from app.db.repositories.food_item_repository import FoodItemRepository
from app.db.repositories.swap_repository import SwapRepository
from app.db.repositories.user_repository import UserRepository
from app.schemas.user import (
    ReviewPage,
    ReviewResponse,
    UserProfileResponse,
    UserReputation,
    UserSummary,
)
from app.services.trust_score import average_rating

settings = get_settings()


class UserService:
    """Read side of reputation. Writes happen in SwapService."""

    def __init__(
        self,
        user_repo: UserRepository,
        food_repo: FoodItemRepository,
        swap_repo: SwapRepository,
    ):
        self.user_repo = user_repo
        self.food_repo = food_repo
        self.swap_repo = swap_repo

    async def get_profile(self, user_id: int, use_cache: bool = True) -> UserProfileResponse:
        """
        Reputation fields come from the cache when present. Listing counts move
        with every claim, release and sweep, so they are always counted fresh.
        """
        reputation = None
        if use_cache:
            cached = await cache_get(profile_key(user_id))
            if cached:
                reputation = json.loads(cached)
        if reputation is None:
            user = await self.user_repo.get_by_id(user_id)
            if not user or not user.is_active:
                raise NotFoundError("User not found")
            reputation = UserReputation(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                trust_score=user.trust_score,
                avg_rating=round(average_rating(user.rating_sum, user.rating_count), 1),
                rating_count=user.rating_count,
                items_shared=user.items_shared,
                items_received=user.items_received,
                created_at=user.created_at,
            ).model_dump(mode="json")
            if use_cache:
                await cache_set(profile_key(user_id), reputation, settings.profile_cache_ttl)
        return UserProfileResponse(
            **reputation,
            food_items_count=await self.food_repo.count_by_owner(user_id),
            active_listings_count=await self.food_repo.count_by_owner(
                user_id, status=FoodStatus.AVAILABLE
            ),
        )

    async def list_reviews(self, user_id: int, *, page: int = 1, limit: int = 10) -> ReviewPage:
        """Reviews this user received, newest first."""
        if not await self.user_repo.get_by_id(user_id):
            raise NotFoundError("User not found")
        swaps, total = await self.swap_repo.list_reviews_received(
            user_id, skip=(page - 1) * limit, limit=limit
        )
        reviews = []
        for swap in swaps:
            if swap.provider_id == user_id and swap.provider_rating > 0:
                reviews.append(
                    ReviewResponse(
                        swap_id=swap.id,
                        rating=swap.provider_rating,
                        review=swap.provider_review,
                        reviewer=UserSummary.model_validate(swap.requester),
                        food_item_title=swap.food_item.title,
                        is_provider=True,
                        date=swap.updated_at,
                    )
                )
            else:
                reviews.append(
                    ReviewResponse(
                        swap_id=swap.id,
                        rating=swap.requester_rating,
                        review=swap.requester_review,
                        reviewer=UserSummary.model_validate(swap.provider),
                        food_item_title=swap.food_item.title,
                        is_provider=False,
                        date=swap.updated_at,
                    )
                )
        return ReviewPage(
            reviews=reviews,
            total=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )
