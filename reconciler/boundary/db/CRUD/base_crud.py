"""
Base CRUD operations for SQLAlchemy models.

Provides generic create, get and delete operations keyed by a
model's primary key column, inherited by model-specific CRUD classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model
    with a single-column primary key. Subclasses specify the model class and
    can override or extend these methods for model-specific behavior.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
        key: Primary key column attribute
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model
        primary_key = inspect(model).primary_key
        self.key = getattr(model, primary_key[0].key)

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with defaults populated
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_key(self, session: AsyncSession, key: Any) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            key: Primary key value

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.key == key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_key(self, session: AsyncSession, key: Any) -> bool:
        """
        Delete a record by primary key.

        Args:
            session: Async database session
            key: Primary key value

        Returns:
            True if record was deleted, False if not found
        """
        stmt = delete(self.model).where(self.key == key)
        result = await session.execute(stmt)
        return result.rowcount > 0
