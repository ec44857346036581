"""
Swap model - one claim attempt on a food item, plus its chat log.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base

if TYPE_CHECKING:
    from app.db.models.food_item import FoodItem
    from app.db.models.user import User


class SwapStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Swap(Base):
    """Ledger entry. Status changes go through app.services.swap_transitions."""

    __tablename__ = "swaps"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    provider_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    food_item_id: Mapped[int] = mapped_column(ForeignKey("food_items.id"), nullable=False, index=True)
    offered_item_id: Mapped[int | None] = mapped_column(ForeignKey("food_items.id"), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SwapStatus] = mapped_column(
        Enum(
            SwapStatus,
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=SwapStatus.PENDING,
        index=True,
    )
    is_swap: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_purchase: Mapped[bool] = mapped_column(default=False, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # 0 = unrated, else 1-5
    requester_rating: Mapped[int] = mapped_column(default=0, nullable=False)
    provider_rating: Mapped[int] = mapped_column(default=0, nullable=False)
    requester_review: Mapped[str | None] = mapped_column(Text, nullable=True)
    provider_review: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id])
    provider: Mapped["User"] = relationship("User", foreign_keys=[provider_id])
    food_item: Mapped["FoodItem"] = relationship("FoodItem", foreign_keys=[food_item_id])
    offered_item: Mapped["FoodItem | None"] = relationship("FoodItem", foreign_keys=[offered_item_id])
    messages: Mapped[list["SwapMessage"]] = relationship(
        "SwapMessage",
        back_populates="swap",
        order_by="SwapMessage.id",
        cascade="all, delete-orphan",
    )

    @property
    def is_item_exchange(self) -> bool:
        """True item-for-item swap: both sides receive something."""
        return bool(self.is_swap and self.offered_item_id)

    def item_ids(self) -> list[int]:
        ids = [self.food_item_id]
        if self.is_item_exchange:
            ids.append(self.offered_item_id)
        return ids

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.requester_id, self.provider_id)

    def __repr__(self) -> str:
        return f"<Swap(id={self.id}, food_item_id={self.food_item_id}, status={self.status})>"


class SwapMessage(Base):
    """Append-only chat entry between the two participants."""

    __tablename__ = "swap_messages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    swap_id: Mapped[int] = mapped_column(
        ForeignKey("swaps.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    swap: Mapped["Swap"] = relationship("Swap", back_populates="messages")
    sender: Mapped["User"] = relationship("User")

    def __repr__(self) -> str:
        return f"<SwapMessage(id={self.id}, swap_id={self.swap_id})>"
