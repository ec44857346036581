# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from app.db.repositories.food_item_repository import FoodItemRepository
from app.db.repositories.swap_repository import SwapRepository
from app.db.repositories.user_repository import UserRepository

__all__ = ["UserRepository", "FoodItemRepository", "SwapRepository"]
