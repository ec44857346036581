"""
Swap repository - ledger reads and guarded writes.
Challenge: Avoid N+1 when rendering swaps (eager-load items, users, messages)
and make every ledger write conditional on the state it was validated against.
"""

from datetime import datetime

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import selectinload

from app.db.models.swap import Swap, SwapMessage, SwapStatus
from app.db.repositories.base_repository import BaseRepository

_FULL_LOAD = (
    selectinload(Swap.food_item),
    selectinload(Swap.offered_item),
    selectinload(Swap.requester),
    selectinload(Swap.provider),
    selectinload(Swap.messages).selectinload(SwapMessage.sender),
)


class SwapRepository(BaseRepository[Swap]):
    """Swap-specific queries. All list reads eager-load related rows."""

    def __init__(self, session):
        super().__init__(session, Swap)

    async def get_full(self, swap_id: int) -> Swap | None:
        """Swap with items, participants and messages loaded; always fresh from DB."""
        result = await self.session.execute(
            select(Swap)
            .where(Swap.id == swap_id)
            .options(*_FULL_LOAD)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: int,
        *,
        role: str = "all",
        status: SwapStatus | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Swap], int]:
        """Swaps where the user plays `role`, newest first, plus the total count."""
        if role == "requester":
            condition = Swap.requester_id == user_id
        elif role == "provider":
            condition = Swap.provider_id == user_id
        else:
            condition = or_(Swap.requester_id == user_id, Swap.provider_id == user_id)
        if status is not None:
            condition = and_(condition, Swap.status == status)

        total = (
            await self.session.execute(select(func.count(Swap.id)).where(condition))
        ).scalar_one()
        result = await self.session.execute(
            select(Swap)
            .where(condition)
            .options(*_FULL_LOAD)
            .order_by(Swap.created_at.desc(), Swap.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def list_pending_for_provider(self, provider_id: int) -> list[Swap]:
        result = await self.session.execute(
            select(Swap)
            .where(Swap.provider_id == provider_id, Swap.status == SwapStatus.PENDING)
            .options(*_FULL_LOAD)
            .order_by(Swap.id)
        )
        return list(result.scalars().all())

    async def count_active_for_item(self, food_item_id: int) -> int:
        """Pending or accepted swaps that reference the item as their primary listing."""
        result = await self.session.execute(
            select(func.count(Swap.id)).where(
                Swap.food_item_id == food_item_id,
                Swap.status.in_([SwapStatus.PENDING, SwapStatus.ACCEPTED]),
            )
        )
        return result.scalar_one()

    async def list_reviews_received(
        self, user_id: int, *, skip: int = 0, limit: int = 10
    ) -> tuple[list[Swap], int]:
        """Completed swaps in which someone rated this user."""
        condition = and_(
            Swap.status == SwapStatus.COMPLETED,
            or_(
                and_(Swap.provider_id == user_id, Swap.provider_rating > 0),
                and_(Swap.requester_id == user_id, Swap.requester_rating > 0),
            ),
        )
        total = (
            await self.session.execute(select(func.count(Swap.id)).where(condition))
        ).scalar_one()
        result = await self.session.execute(
            select(Swap)
            .where(condition)
            .options(selectinload(Swap.requester), selectinload(Swap.provider), selectinload(Swap.food_item))
            .order_by(Swap.updated_at.desc(), Swap.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def compare_and_set_status(
        self,
        swap_id: int,
        *,
        expected: SwapStatus,
        new: SwapStatus,
        now: datetime,
    ) -> bool:
        """Write the new status only if nobody moved the swap since it was read."""
        result = await self.session.execute(
            update(Swap)
            .where(Swap.id == swap_id, Swap.status == expected)
            .values(status=new, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def record_rating(
        self,
        swap_id: int,
        *,
        side: str,
        rating: int,
        review: str | None,
        now: datetime,
    ) -> bool:
        """
        Store a rating for `side` ("provider" or "requester") if that side is
        still unrated. Returns False when a rating is already present.
        """
        if side == "provider":
            rating_col, values = Swap.provider_rating, {"provider_rating": rating, "provider_review": review}
        else:
            rating_col, values = Swap.requester_rating, {"requester_rating": rating, "requester_review": review}
        result = await self.session.execute(
            update(Swap)
            .where(Swap.id == swap_id, Swap.status == SwapStatus.COMPLETED, rating_col == 0)
            .values(updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def add_message(self, swap_id: int, sender_id: int, content: str) -> SwapMessage:
        message = SwapMessage(swap_id=swap_id, sender_id=sender_id, content=content)
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message, attribute_names=["id", "created_at", "sender"])
        return message

    async def list_messages(self, swap_id: int) -> list[SwapMessage]:
        result = await self.session.execute(
            select(SwapMessage)
            .where(SwapMessage.swap_id == swap_id)
            .options(selectinload(SwapMessage.sender))
            .order_by(SwapMessage.id)
        )
        return list(result.scalars().all())
