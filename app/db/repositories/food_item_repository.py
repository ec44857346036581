"""
Food item repository - listing queries and the status gate.
Challenge: Claims must be race-free; every status change is a conditional UPDATE
whose rowcount decides the winner, never a read-then-write in Python.
"""

from datetime import datetime

from sqlalchemy import func, select, update

from app.db.models.food_item import FoodCategory, FoodItem, FoodStatus
from app.db.repositories.base_repository import BaseRepository


class FoodItemRepository(BaseRepository[FoodItem]):
    """Food-item queries plus compare-and-set status transitions."""

    def __init__(self, session):
        super().__init__(session, FoodItem)

    async def list_available(
        self,
        *,
        category: FoodCategory | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[FoodItem]:
        """Claimable listings, soonest-expiring first."""
        stmt = select(FoodItem).where(FoodItem.status == FoodStatus.AVAILABLE)
        if category is not None:
            stmt = stmt.where(FoodItem.category == category)
        result = await self.session.execute(
            stmt.order_by(FoodItem.expires_at, FoodItem.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def list_by_owner(self, owner_id: int) -> list[FoodItem]:
        result = await self.session.execute(
            select(FoodItem).where(FoodItem.owner_id == owner_id).order_by(FoodItem.id.desc())
        )
        return list(result.scalars().all())

    async def count_by_owner(self, owner_id: int, *, status: FoodStatus | None = None) -> int:
        stmt = select(func.count(FoodItem.id)).where(FoodItem.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(FoodItem.status == status)
        return (await self.session.execute(stmt)).scalar_one()

    async def reserve(self, item_id: int, *, now: datetime) -> bool:
        """
        Atomically move an unexpired listing from available to reserved.
        Returns False when another writer (claim or sweeper) got there first.
        """
        result = await self.session.execute(
            update(FoodItem)
            .where(
                FoodItem.id == item_id,
                FoodItem.status == FoodStatus.AVAILABLE,
                FoodItem.expires_at > now,
            )
            .values(status=FoodStatus.RESERVED, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def transition(
        self,
        item_ids: list[int],
        *,
        from_status: FoodStatus,
        to_status: FoodStatus,
        now: datetime,
    ) -> int:
        """Move listings between statuses, only those currently in from_status."""
        result = await self.session.execute(
            update(FoodItem)
            .where(FoodItem.id.in_(item_ids), FoodItem.status == from_status)
            .values(status=to_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def expire_due(self, *, now: datetime) -> list[int]:
        """Demote every available listing whose deadline has passed. Returns demoted ids."""
        result = await self.session.execute(
            update(FoodItem)
            .where(FoodItem.status == FoodStatus.AVAILABLE, FoodItem.expires_at <= now)
            .values(status=FoodStatus.EXPIRED, updated_at=now)
            .returning(FoodItem.id)
            .execution_options(synchronize_session=False)
        )
        return list(result.scalars().all())
