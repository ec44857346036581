"""
FastAPI dependencies - actor resolution and service wiring (SOLID: Dependency Inversion).
Challenge: Reusable auth, consistent error responses.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.db.session import DbSession
from app.db.repositories import FoodItemRepository, SwapRepository, UserRepository
from app.core.security import decode_access_token
from app.services.food_service import FoodItemService
from app.services.swap_service import SwapService
from app.services.user_service import UserService

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int:
    """Resolve JWT to user id. Raises 401 if missing or invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or not str(payload.get("sub", "")).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    repo = UserRepository(session)
    user = await repo.get_by_id(int(payload["sub"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user.id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]


def get_swap_service(session: DbSession) -> SwapService:
    """Factory for service with repository injection (Dependency Inversion)."""
    return SwapService(SwapRepository(session), FoodItemRepository(session), UserRepository(session))


def get_food_service(session: DbSession) -> FoodItemService:
    return FoodItemService(FoodItemRepository(session))


def get_user_service(session: DbSession) -> UserService:
    return UserService(UserRepository(session), FoodItemRepository(session), SwapRepository(session))


SwapServiceDep = Annotated[SwapService, Depends(get_swap_service)]
FoodServiceDep = Annotated[FoodItemService, Depends(get_food_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
