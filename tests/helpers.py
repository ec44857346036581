"""Shared helpers for tests that talk to the ledger directly."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import create_access_token
from app.db.models import FoodItem, FoodStatus, User
from app.db.repositories import FoodItemRepository, SwapRepository, UserRepository
from app.services.swap_service import SwapService


def auth_for(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


def swap_service(session: AsyncSession) -> SwapService:
    return SwapService(SwapRepository(session), FoodItemRepository(session), UserRepository(session))


async def food_status(session: AsyncSession, item_id: int) -> FoodStatus:
    result = await session.execute(select(FoodItem.status).where(FoodItem.id == item_id))
    return result.scalar_one()


async def fresh_user(session: AsyncSession, user_id: int) -> User:
    return await UserRepository(session).get_by_id(user_id)
