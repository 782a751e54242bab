# app/repositories/base/base_repository.py
"""
Base repository with common CRUD operations and utilities.

Repositories never commit: the calling service owns the transaction and
decides when to commit or roll back. ``create``/``update``/``delete``
flush so that constraint violations surface inside the service's
transaction.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.models.base.base_model import BaseModel

T = TypeVar('T', bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Base repository providing common database operations.
    """

    def __init__(self, model: Type[T], session: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Database session
        """
        self.model = model
        self.session = session

    # ============================================================================
    # CREATE OPERATIONS
    # ============================================================================

    def create(self, data: Dict[str, Any], flush: bool = True) -> T:
        """
        Create a new entity.

        Args:
            data: Entity data
            flush: Whether to flush session

        Returns:
            Created entity

        Raises:
            IntegrityError: If unique constraint violated
        """
        entity = self.model(**data)
        self.session.add(entity)
        if flush:
            self.session.flush()
        return entity

    # ============================================================================
    # READ OPERATIONS
    # ============================================================================

    def find_by_id(self, id: str) -> Optional[T]:
        return self.session.get(self.model, id)

    def find_by_criteria(
        self,
        filters: Dict[str, Any],
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[T]:
        """
        Find entities matching equality criteria.

        Args:
            filters: Column name to value mapping; ``None`` values are skipped
            order_by: Column expressions to order by
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of entities
        """
        query = self._apply_filters(select(self.model), filters)

        if order_by:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        return list(self.session.execute(query).scalars().all())

    # ============================================================================
    # UPDATE / DELETE OPERATIONS
    # ============================================================================

    def update(self, entity: T, data: Dict[str, Any], flush: bool = True) -> T:
        """Apply ``data`` to ``entity``; unknown keys are ignored."""
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        if flush:
            self.session.flush()
        return entity

    def delete(self, entity: T, flush: bool = True) -> None:
        self.session.delete(entity)
        if flush:
            self.session.flush()

    # ============================================================================
    # HELPERS
    # ============================================================================

    def _apply_filters(self, query: Select, filters: Dict[str, Any]) -> Select:
        for field, value in filters.items():
            if value is None:
                continue
            column = getattr(self.model, field, None)
            if column is None:
                raise ValueError(f"Unknown filter field '{field}' for {self.model.__name__}")
            query = query.where(column == value)
        return query


class TenantScopedRepository(BaseRepository[T]):
    """
    Repository for tenant-owned models.

    Every lookup is filtered by ``tenant_id`` so rows of another tenant are
    indistinguishable from missing rows.
    """

    def find_in_tenant(self, tenant_id: str, id: str) -> Optional[T]:
        query = select(self.model).where(
            self.model.id == id,
            self.model.tenant_id == tenant_id,
        )
        return self.session.execute(query).scalar_one_or_none()

    def find_in_tenant_for_update(self, tenant_id: str, id: str) -> Optional[T]:
        """
        Load a row with ``SELECT ... FOR UPDATE``.

        The row lock is held until the surrounding transaction ends. Backends
        without row locks (SQLite) ignore the clause. ``populate_existing``
        refreshes an instance already present in the identity map.
        """
        query = (
            select(self.model)
            .where(self.model.id == id, self.model.tenant_id == tenant_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.session.execute(query).scalar_one_or_none()

    def find_all_in_tenant(
        self,
        tenant_id: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> List[T]:
        criteria = dict(filters or {})
        criteria["tenant_id"] = tenant_id
        return self.find_by_criteria(criteria, order_by=order_by, limit=limit, offset=offset)
