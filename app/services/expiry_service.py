"""
Expiry sweep - demote listings past their deadline.
Only touches `available` rows; reserved and completed items belong to the swap ledger.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.metrics import ITEMS_EXPIRED
from app.db.repositories.food_item_repository import FoodItemRepository

logger = logging.getLogger(__name__)


async def sweep_expired_items(session: AsyncSession, now: datetime | None = None) -> list[int]:
    """Run one sweep pass inside the caller's transaction and return the demoted ids."""
    now = now or datetime.now(timezone.utc)
    expired_ids = await FoodItemRepository(session).expire_due(now=now)
    if expired_ids:
        ITEMS_EXPIRED.inc(len(expired_ids))
        logger.info("Expiry sweep demoted %d listing(s): %s", len(expired_ids), expired_ids)
    return expired_ids
