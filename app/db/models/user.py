"""
User model - identity display fields plus reputation counters.
Accounts are created by the auth service; this service owns the counters.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """User entity. trust_score is derived and only written by the review flow."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Reputation counters: incremented in SQL, never reset
    rating_sum: Mapped[int] = mapped_column(default=0, nullable=False)
    rating_count: Mapped[int] = mapped_column(default=0, nullable=False)
    trust_score: Mapped[int] = mapped_column(default=0, nullable=False)
    items_shared: Mapped[int] = mapped_column(default=0, nullable=False)
    items_received: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
