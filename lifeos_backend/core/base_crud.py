"""
Base CRUD operations for consistent data access patterns across all modules.
Every query is scoped to the owning Supabase user (``user_id``).
"""

from abc import ABC
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from ..modules.commons.schemas import PaginationParams
from .exceptions import DatabaseError
from .logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


class BaseCRUD(Generic[ModelType, CreateSchemaType, UpdateSchemaType], ABC):
    """
    Base CRUD class providing common database operations.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Fields to search in for text-based queries
        default_order_by: Default ordering field
        default_order_desc: Whether the default ordering is descending
    """

    def __init__(self, model: type[ModelType]):
        """Initialize CRUD operations for a specific model."""
        self.model = model

    search_fields: list[str] = []
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    def _apply_user_filter(self, query: Select, user_id: UUID) -> Select:
        """Restrict a query to rows owned by the user."""
        return query.where(self.model.user_id == user_id)

    def _apply_active_filter(
        self, query: Select, is_active: bool | None = None
    ) -> Select:
        """Apply is_active filtering if the model supports it."""
        if is_active is not None and hasattr(self.model, "is_active"):
            return query.where(self.model.is_active == is_active)
        return query

    def _apply_search_filter(
        self, query: Select, search_query: str | None = None
    ) -> Select:
        """Apply text-based search filtering across configured search fields."""
        if search_query and self.search_fields:
            search_conditions = []
            for field_name in self.search_fields:
                if hasattr(self.model, field_name):
                    field = getattr(self.model, field_name)
                    search_conditions.append(field.ilike(f"%{search_query}%"))
            if search_conditions:
                query = query.where(or_(*search_conditions))
        return query

    def _apply_custom_filters(
        self, query: Select, filters: dict[str, Any] | None = None
    ) -> Select:
        """Apply additional equality filters, skipping None values."""
        if not filters:
            return query

        for field_name, value in filters.items():
            if value is not None and hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                query = query.where(field == value)
        return query

    def _apply_ordering(self, query: Select, order_by: str | None = None) -> Select:
        """Apply ordering to query."""
        order_field = order_by or self.default_order_by
        if hasattr(self.model, order_field):
            field = getattr(self.model, order_field)
            if self.default_order_desc:
                query = query.order_by(field.desc())
            else:
                query = query.order_by(field)
        return query

    async def _commit(self, db: AsyncSession, operation: str) -> None:
        """Commit the session; failures are rolled back and raised as DatabaseError."""
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            table = self.model.__tablename__
            logger.error(f"Failed to {operation} {table} row: {e}")
            raise DatabaseError(
                f"Could not {operation} {table} row",
                details={"operation": operation, "table": table},
            ) from e

    async def create(
        self,
        db: AsyncSession,
        obj_in: CreateSchemaType | dict[str, Any],
        user_id: UUID,
        **kwargs,
    ) -> ModelType:
        """
        Create a new record owned by ``user_id``.

        Args:
            db: Database session
            obj_in: Data for creating the record
            user_id: Owning user
            **kwargs: Additional fields to set on the model

        Returns:
            The created model instance
        """
        if isinstance(obj_in, dict):
            obj_data = dict(obj_in)
        else:
            obj_data = obj_in.model_dump(exclude_unset=True)

        obj_data["user_id"] = user_id
        obj_data.update(kwargs)

        db_obj = self.model(**obj_data)
        db.add(db_obj)
        await self._commit(db, "create")
        await db.refresh(db_obj)
        return db_obj

    async def get(
        self,
        db: AsyncSession,
        user_id: UUID,
        id: UUID,
    ) -> ModelType | None:
        """Get a single record by id within the user's scope."""
        query = select(self.model).where(
            and_(
                self.model.user_id == user_id,
                self.model.id == id,
            )
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        user_id: UUID,
        pagination: PaginationParams | None = None,
        is_active: bool | None = None,
        search_query: str | None = None,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> tuple[list[ModelType], int]:
        """
        Get multiple records with pagination, filtering, and search.

        Returns:
            Tuple of (records, total_count)
        """
        query = select(self.model)
        query = self._apply_user_filter(query, user_id)
        query = self._apply_active_filter(query, is_active)
        query = self._apply_search_filter(query, search_query)
        query = self._apply_custom_filters(query, filters)
        query = self._apply_ordering(query, order_by)

        count_query = select(func.count(self.model.id))
        count_query = self._apply_user_filter(count_query, user_id)
        count_query = self._apply_active_filter(count_query, is_active)
        count_query = self._apply_search_filter(count_query, search_query)
        count_query = self._apply_custom_filters(count_query, filters)

        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        if pagination is not None:
            query = query.offset(pagination.offset).limit(pagination.page_size)

        result = await db.execute(query)
        items = result.scalars().all()

        return list(items), total

    async def get_all(
        self,
        db: AsyncSession,
        user_id: UUID,
        filters: dict[str, Any] | None = None,
        is_active: bool | None = None,
    ) -> list[ModelType]:
        """Get every matching record without pagination."""
        items, _ = await self.get_multi(
            db, user_id, filters=filters, is_active=is_active
        )
        return items

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | dict[str, Any],
    ) -> ModelType:
        """
        Update a record.

        Args:
            db: Database session
            db_obj: Existing database object
            obj_in: Update data

        Returns:
            The updated model instance
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._commit(db, "update")
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """Hard delete a record."""
        await db.delete(db_obj)
        await self._commit(db, "delete")
