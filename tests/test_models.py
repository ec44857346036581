"""
Model mapping tests - relationships the ledger relies on.
"""

import pytest
from sqlalchemy import inspect

from app.db.models import FoodItem, Swap, SwapMessage, User


@pytest.mark.parametrize("model", [User, FoodItem, Swap, SwapMessage])
def test_no_relationship_uses_noload(model):
    for rel in inspect(model).relationships:
        assert rel.lazy != "noload", f"{model.__name__}.{rel.key}"


def test_user_has_no_listing_collection():
    assert "food_items" not in inspect(User).relationships
    assert inspect(FoodItem).relationships["owner"].mapper.class_ is User
