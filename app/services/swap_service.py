"""
Swap service - the claim ledger (SOLID: Single Responsibility).
Challenge: A listing may back at most one active swap, completing a swap moves
two users' counters and up to two listings together, and a rating lands once.
Design: Validation reads happen first; every write that decides a race is a
conditional UPDATE in the repositories. The request-scoped session commits
everything together or rolls it all back.
"""

import logging
import math
from datetime import datetime, timezone

from app.cache.redis_client import invalidate_on_commit, profile_key
from app.core.exceptions import (
    AlreadyReviewedError,
    ForbiddenError,
    InputValidationError,
    InvalidTransitionError,
    ItemUnavailableError,
    NotCompletedError,
    NotFoundError,
    OfferedItemUnavailableError,
)
from app.core.metrics import CLAIM_CONFLICTS, REVIEWS_SUBMITTED, SWAP_TRANSITIONS
from app.db.models.food_item import FoodItem, FoodStatus
from app.db.models.swap import Swap, SwapMessage, SwapStatus
from app.db.repositories.food_item_repository import FoodItemRepository
from app.db.repositories.swap_repository import SwapRepository
from app.db.repositories.user_repository import UserRepository
from app.queue import tasks
from app.schemas.food import FoodItemSummary
from app.schemas.swap import MessageResponse, SwapCreate, SwapPage, SwapResponse
from app.schemas.user import UserSummary
from app.services import swap_transitions
from app.services.swap_transitions import Actor
from app.services.trust_score import trust_score

logger = logging.getLogger(__name__)

MESSAGING_STATUSES = frozenset({SwapStatus.ACCEPTED, SwapStatus.COMPLETED})

_ACTOR_DENIED = {
    Actor.PROVIDER: "Only the provider can accept or reject a swap",
    Actor.REQUESTER: "Only the requester can mark a swap as completed",
    Actor.EITHER: "Not authorized to update this swap",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_rating(rating: int) -> int:
    return max(1, min(5, int(rating)))


def message_to_response(message: SwapMessage) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        content=message.content,
        timestamp=message.created_at,
        sender=UserSummary.model_validate(message.sender),
    )


def swap_to_response(swap: Swap) -> SwapResponse:
    """Map a fully loaded swap to the API response."""
    return SwapResponse(
        id=swap.id,
        requester_id=swap.requester_id,
        provider_id=swap.provider_id,
        food_item_id=swap.food_item_id,
        offered_item_id=swap.offered_item_id,
        message=swap.message,
        status=swap.status,
        is_swap=swap.is_swap,
        is_purchase=swap.is_purchase,
        amount=swap.amount,
        requester_rating=swap.requester_rating,
        provider_rating=swap.provider_rating,
        requester_review=swap.requester_review,
        provider_review=swap.provider_review,
        created_at=swap.created_at,
        updated_at=swap.updated_at,
        food_item=FoodItemSummary.model_validate(swap.food_item),
        offered_item=FoodItemSummary.model_validate(swap.offered_item) if swap.offered_item else None,
        requester=UserSummary.model_validate(swap.requester),
        provider=UserSummary.model_validate(swap.provider),
        messages=[message_to_response(m) for m in swap.messages],
    )


class SwapService:
    """Swap lifecycle: request, transition, review, chat, and read queries."""

    def __init__(
        self,
        swap_repo: SwapRepository,
        food_repo: FoodItemRepository,
        user_repo: UserRepository,
    ):
        self.swap_repo = swap_repo
        self.food_repo = food_repo
        self.user_repo = user_repo

    async def _load(self, swap_id: int) -> Swap:
        swap = await self.swap_repo.get_full(swap_id)
        if not swap:
            raise NotFoundError("Swap not found")
        return swap

    async def _reload(self, swap_id: int) -> Swap:
        # Conditional UPDATEs bypass the identity map; drop cached state first
        self.swap_repo.session.expire_all()
        return await self._load(swap_id)

    async def _load_for_participant(self, swap_id: int, actor_id: int, denied: str) -> Swap:
        swap = await self._load(swap_id)
        if not swap.is_participant(actor_id):
            raise ForbiddenError(denied)
        return swap

    # --- create -----------------------------------------------------------

    async def request_swap(self, requester_id: int, data: SwapCreate) -> SwapResponse:
        """
        Claim a listing (optionally offering one of the requester's own).
        The listing flips to reserved in the same transaction as the insert;
        a requester who loses the race gets ItemUnavailableError.
        """
        now = _utcnow()
        food = await self.food_repo.get_by_id(data.food_item_id)
        if not food:
            raise NotFoundError("Food item not found")
        if food.owner_id == requester_id:
            raise InputValidationError("Cannot request your own food item")
        if food.status != FoodStatus.AVAILABLE:
            CLAIM_CONFLICTS.labels(item="primary").inc()
            raise ItemUnavailableError()

        offered = await self._check_offered_item(requester_id, food, data.offered_item_id)

        if not await self.food_repo.reserve(food.id, now=now):
            CLAIM_CONFLICTS.labels(item="primary").inc()
            logger.info("User %s lost the claim race for food item %s", requester_id, food.id)
            raise ItemUnavailableError()
        if offered and not await self.food_repo.reserve(offered.id, now=now):
            # Give the primary listing back before failing
            await self.food_repo.transition(
                [food.id], from_status=FoodStatus.RESERVED, to_status=FoodStatus.AVAILABLE, now=now
            )
            CLAIM_CONFLICTS.labels(item="offered").inc()
            raise OfferedItemUnavailableError()

        swap = Swap(
            requester_id=requester_id,
            provider_id=food.owner_id,
            food_item_id=food.id,
            offered_item_id=offered.id if offered else None,
            message=data.message,
            status=SwapStatus.PENDING,
            is_swap=bool(data.is_swap or offered),
            is_purchase=data.is_purchase,
            amount=food.price if data.is_purchase else 0,
            requester_rating=0,
            provider_rating=0,
        )
        swap = await self.swap_repo.add(swap)
        SWAP_TRANSITIONS.labels(to_status=SwapStatus.PENDING.value).inc()
        logger.info(
            "Swap %s requested by user %s for food item %s (offered item %s)",
            swap.id, requester_id, food.id, swap.offered_item_id,
        )
        for item_id in swap.item_ids():
            tasks.enqueue_status_sync(item_id, FoodStatus.RESERVED.value)
        return swap_to_response(await self._reload(swap.id))

    async def _check_offered_item(
        self, requester_id: int, food: FoodItem, offered_item_id: int | None
    ) -> FoodItem | None:
        if offered_item_id is None:
            return None
        if offered_item_id == food.id:
            raise OfferedItemUnavailableError("A food item cannot be offered in exchange for itself")
        offered = await self.food_repo.get_by_id(offered_item_id)
        if not offered or offered.owner_id != requester_id or offered.status != FoodStatus.AVAILABLE:
            CLAIM_CONFLICTS.labels(item="offered").inc()
            raise OfferedItemUnavailableError()
        return offered

    # --- transitions ------------------------------------------------------

    async def set_status(self, swap_id: int, actor_id: int, new_status: SwapStatus) -> SwapResponse:
        swap = await self._load_for_participant(swap_id, actor_id, "Not authorized to update this swap")
        current = swap.status
        if not swap_transitions.is_allowed(current, new_status):
            raise InvalidTransitionError(
                f"Cannot change status from {current.value} to {new_status.value}"
            )
        actor = swap_transitions.required_actor(current, new_status)
        if not swap_transitions.actor_may(swap, actor_id, actor):
            raise ForbiddenError(_ACTOR_DENIED[actor])

        now = _utcnow()
        if not await self.swap_repo.compare_and_set_status(
            swap.id, expected=current, new=new_status, now=now
        ):
            raise InvalidTransitionError(
                f"Swap changed concurrently; cannot move it from {current.value} to {new_status.value}"
            )

        item_ids = swap.item_ids()
        if new_status in swap_transitions.RELEASING:
            await self.food_repo.transition(
                item_ids, from_status=FoodStatus.RESERVED, to_status=FoodStatus.AVAILABLE, now=now
            )
            synced_status = FoodStatus.AVAILABLE
        elif new_status == SwapStatus.COMPLETED:
            await self._apply_completion(swap, item_ids, now)
            synced_status = FoodStatus.COMPLETED
        else:
            synced_status = None

        SWAP_TRANSITIONS.labels(to_status=new_status.value).inc()
        logger.info(
            "Swap %s moved %s -> %s by user %s", swap.id, current.value, new_status.value, actor_id
        )
        if synced_status is not None:
            for item_id in item_ids:
                tasks.enqueue_status_sync(item_id, synced_status.value)
        return swap_to_response(await self._reload(swap.id))

    async def _apply_completion(self, swap: Swap, item_ids: list[int], now: datetime) -> None:
        await self.food_repo.transition(
            item_ids, from_status=FoodStatus.RESERVED, to_status=FoodStatus.COMPLETED, now=now
        )
        await self.user_repo.increment_activity(swap.requester_id, received=1)
        # The provider of an item exchange also receives the offered item
        await self.user_repo.increment_activity(
            swap.provider_id, shared=1, received=1 if swap.is_item_exchange else 0
        )
        await invalidate_on_commit(
            self.swap_repo.session, profile_key(swap.requester_id), profile_key(swap.provider_id)
        )

    # --- reviews ----------------------------------------------------------

    async def submit_review(
        self,
        swap_id: int,
        actor_id: int,
        review_for: str,
        rating: int,
        review: str | None = None,
    ) -> SwapResponse:
        """
        Rate the other side of a completed swap. Requesters may always rate the
        provider; providers may rate the requester only on item exchanges.
        """
        swap = await self._load(swap_id)
        if swap.status != SwapStatus.COMPLETED:
            raise NotCompletedError()
        if not swap.is_participant(actor_id):
            raise ForbiddenError("Not authorized to review this swap")

        if review_for == "provider":
            if actor_id != swap.requester_id:
                raise ForbiddenError("Only the recipient can review the provider")
            rated_user_id = swap.provider_id
        elif review_for == "requester":
            if actor_id != swap.provider_id or not swap.is_item_exchange:
                raise ForbiddenError("Only the provider of an item exchange can review the requester")
            rated_user_id = swap.requester_id
        else:
            raise InputValidationError("review_for must be 'provider' or 'requester'")

        rating = clamp_rating(rating)
        now = _utcnow()
        if not await self.swap_repo.record_rating(
            swap.id, side=review_for, rating=rating, review=review, now=now
        ):
            raise AlreadyReviewedError()

        rated = await self.user_repo.add_rating(rated_user_id, rating)
        score = trust_score(rated.rating_sum, rated.rating_count, rated.items_shared, rated.items_received)
        await self.user_repo.set_trust_score(rated_user_id, score)
        await invalidate_on_commit(self.swap_repo.session, profile_key(rated_user_id))

        REVIEWS_SUBMITTED.labels(review_for=review_for).inc()
        logger.info(
            "Swap %s: user %s rated %s %d stars; trust score now %d",
            swap.id, actor_id, review_for, rating, score,
        )
        return swap_to_response(await self._reload(swap.id))

    # --- messaging --------------------------------------------------------

    async def add_message(self, swap_id: int, actor_id: int, content: str) -> MessageResponse:
        swap = await self._load_for_participant(swap_id, actor_id, "Not authorized to message in this swap")
        if swap.status not in MESSAGING_STATUSES:
            raise InvalidTransitionError("Can only message in accepted or completed swaps")
        message = await self.swap_repo.add_message(swap.id, actor_id, content)
        return message_to_response(message)

    async def list_messages(self, swap_id: int, actor_id: int) -> list[MessageResponse]:
        swap = await self._load_for_participant(
            swap_id, actor_id, "Not authorized to view messages in this swap"
        )
        return [message_to_response(m) for m in await self.swap_repo.list_messages(swap.id)]

    # --- queries ----------------------------------------------------------

    async def get_swap(self, swap_id: int, actor_id: int) -> SwapResponse:
        swap = await self._load_for_participant(swap_id, actor_id, "Not authorized to view this swap")
        return swap_to_response(swap)

    async def list_my_swaps(
        self,
        user_id: int,
        *,
        role: str = "all",
        status: SwapStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> SwapPage:
        swaps, total = await self.swap_repo.list_for_user(
            user_id, role=role, status=status, skip=(page - 1) * limit, limit=limit
        )
        return SwapPage(
            swaps=[swap_to_response(s) for s in swaps],
            total=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )

    async def list_pending(self, provider_id: int) -> list[SwapResponse]:
        return [swap_to_response(s) for s in await self.swap_repo.list_pending_for_provider(provider_id)]
