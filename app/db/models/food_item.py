"""
FoodItem model - a surplus food listing.
Status doubles as the claim lock: only the swap ledger and the expiry sweeper write it.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.db.models.user import User


class FoodStatus(str, enum.Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    COMPLETED = "completed"
    EXPIRED = "expired"


class FoodCategory(str, enum.Enum):
    MEAL = "meal"
    PRODUCE = "produce"
    BAKERY = "bakery"
    DAIRY = "dairy"
    PANTRY = "pantry"
    OTHER = "other"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class FoodItem(Base):
    """Food listing. Indexed in Elasticsearch by the Celery worker."""

    __tablename__ = "food_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(nullable=False, default=1)
    quantity_unit: Mapped[str] = mapped_column(String(50), nullable=False, default="servings")
    category: Mapped[FoodCategory] = mapped_column(
        Enum(FoodCategory, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
    )

    # Dietary flags
    vegetarian: Mapped[bool] = mapped_column(default=False, nullable=False)
    vegan: Mapped[bool] = mapped_column(default=False, nullable=False)
    gluten_free: Mapped[bool] = mapped_column(default=False, nullable=False)
    nut_free: Mapped[bool] = mapped_column(default=False, nullable=False)
    dairy_free: Mapped[bool] = mapped_column(default=False, nullable=False)

    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    original_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    is_free: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_pickup_only: Mapped[bool] = mapped_column(default=True, nullable=False)

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[FoodStatus] = mapped_column(
        Enum(FoodStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=FoodStatus.AVAILABLE,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owner: Mapped["User"] = relationship("User")

    @property
    def is_available(self) -> bool:
        return self.status == FoodStatus.AVAILABLE

    @property
    def discount_percentage(self) -> int:
        if self.is_free or not self.original_price or self.original_price <= 0:
            return 100
        return round((self.original_price - self.price) / self.original_price * 100)

    def __repr__(self) -> str:
        return f"<FoodItem(id={self.id}, title={self.title}, status={self.status})>"
