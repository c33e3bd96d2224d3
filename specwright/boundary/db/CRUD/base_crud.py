"""
Base CRUD operations for SQLAlchemy models.

Provides generic Create, Read, Update, Delete operations plus a
dialect-aware upsert that can be inherited and extended by
model-specific CRUD classes.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Mapping, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.boundary.db.base import Base, utcnow

ModelT = TypeVar("ModelT", bound=Base)
RowT = TypeVar("RowT", bound=Base)

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def upsert_row(
    session: AsyncSession,
    model: type[RowT],
    conflict_on: Sequence[str],
    values: Mapping[str, Any],
) -> RowT:
    """
    INSERT ... ON CONFLICT DO UPDATE ... RETURNING for one row.

    Every supplied column other than the conflict target is overwritten on
    conflict; updated_at is bumped explicitly because the ORM onupdate hook
    does not fire for ON CONFLICT.

    Args:
        session: Async database session
        model: Target ORM model
        conflict_on: Column names of the unique key
        values: Column values for the row

    Returns:
        The inserted or updated row, refreshed in the identity map

    Raises:
        NotImplementedError: For dialects without ON CONFLICT support
    """
    dialect = session.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Upsert is not supported for dialect '{dialect}'")

    stmt = insert(model).values(**values)
    set_ = {column: stmt.excluded[column] for column in values if column not in conflict_on}
    if "updated_at" in model.__table__.columns:
        set_["updated_at"] = utcnow()

    stmt = (
        stmt.on_conflict_do_update(index_elements=list(conflict_on), set_=set_)
        .returning(model)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalar_one()


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model.
    Subclasses should specify the model class and can override or extend
    these methods for model-specific behavior.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID | str) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: Primary key

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID | str,
        **kwargs,
    ) -> ModelT | None:
        """
        Update a record by primary key.

        Args:
            session: Async database session
            id: Primary key
            **kwargs: Fields to update with new values

        Returns:
            Updated model instance if found, None otherwise
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
            .returning(self.model)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        conflict_on: Sequence[str],
        **values,
    ) -> ModelT:
        """Upsert one row of this CRUD's model on the given unique key."""
        return await upsert_row(session, self.model, conflict_on, values)
