"""
User repository - reputation counters (SOLID: Single Responsibility).
Challenge: Counters are shared mutable state; increments run as `col = col + n`
in SQL so concurrent requests never lose an update.
"""

from sqlalchemy import select, update

from app.db.models.user import User
from app.db.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """User-specific queries. Extends base CRUD with reputation writes."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def increment_activity(
        self, user_id: int, *, shared: int = 0, received: int = 0
    ) -> None:
        """Bump items_shared / items_received atomically."""
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                items_shared=User.items_shared + shared,
                items_received=User.items_received + received,
            )
            .execution_options(synchronize_session=False)
        )

    async def add_rating(self, user_id: int, rating: int) -> User:
        """
        Atomically add one rating to the user's running totals and return the
        fresh row. The UPDATE holds the row lock until commit, so a concurrent
        rating for the same user waits and then sees both increments.
        """
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                rating_sum=User.rating_sum + rating,
                rating_count=User.rating_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        user = await self.get_by_id(user_id)
        if user is None:
            raise LookupError(f"user {user_id} vanished during rating update")
        return user

    async def set_trust_score(self, user_id: int, trust_score: int) -> None:
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(trust_score=trust_score)
            .execution_options(synchronize_session=False)
        )
