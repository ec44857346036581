# Import every model so Base.metadata is complete (Alembic, test create_all)

from app.db.models.user import User
from app.db.models.food_item import FoodCategory, FoodItem, FoodStatus
from app.db.models.swap import Swap, SwapMessage, SwapStatus

__all__ = [
    "User",
    "FoodItem",
    "FoodStatus",
    "FoodCategory",
    "Swap",
    "SwapMessage",
    "SwapStatus",
]
