"""
SQLAlchemy declarative base and metadata.
Models register themselves by importing app.db.models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models. Enables Alembic migrations."""

    pass
