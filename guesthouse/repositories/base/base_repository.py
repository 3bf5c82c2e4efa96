"""
Base repository with standardized CRUD operations and error handling.

Repositories never commit: the calling service owns the transaction
boundary, so several repository calls can share one unit of work.
Store failures surface as RepositoryError, unique violations as
EntityAlreadyExistsError.
"""

from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from guesthouse.core.exceptions import EntityAlreadyExistsError, RepositoryError
from guesthouse.core.logging import get_logger
from guesthouse.db.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository for a single model.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add entity to the session and flush it.

        Raises:
            EntityAlreadyExistsError: If a unique constraint is violated
        """
        try:
            self.db.add(entity)
            self.db.flush()
            logger.debug(f"Created {self.model.__name__}", extra={"entity_id": entity.id})
            return entity
        except IntegrityError as e:
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create {self.model.__name__} failed") from e

    def create_many(self, entities: Sequence[ModelType]) -> List[ModelType]:
        """Add and flush a batch of entities in one round trip."""
        if not entities:
            return []
        try:
            self.db.add_all(entities)
            self.db.flush()
            return list(entities)
        except IntegrityError as e:
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Bulk create {self.model.__name__} failed") from e

    # ==================== Read Operations ====================

    def find_by_id(self, id: str, refresh: bool = False) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID
            refresh: Reload from the store even if the entity is in the
                identity map (needed after a Core ``update()``)
        """
        try:
            return self.db.get(self.model, id, populate_existing=refresh)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find {self.model.__name__} by ID failed") from e

    def find_by_criteria(
        self,
        *conditions: ColumnElement,
        order_by: Optional[Sequence[Any]] = None,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """Find entities matching all conditions."""
        stmt = select(self.model).where(*conditions)
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise RepositoryError(f"Find {self.model.__name__} by criteria failed") from e

    def find_one_by_criteria(self, *conditions: ColumnElement) -> Optional[ModelType]:
        results = self.find_by_criteria(*conditions, limit=1)
        return results[0] if results else None

    def count(self, *conditions: ColumnElement) -> int:
        stmt = select(func.count()).select_from(self.model).where(*conditions)
        try:
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Count {self.model.__name__} failed") from e

    def exists(self, *conditions: ColumnElement) -> bool:
        return self.count(*conditions) > 0

    # ==================== Update Operations ====================

    def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """
        Apply field values to a loaded entity and flush.

        Raises:
            EntityAlreadyExistsError: If a unique constraint is violated
        """
        for key, value in data.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        try:
            self.db.flush()
            return entity
        except IntegrityError as e:
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Update {self.model.__name__} failed") from e

    def conditional_update(
        self,
        id: str,
        values: Dict[str, Any],
        *preconditions: ColumnElement,
    ) -> bool:
        """
        Compare-and-swap: one ``UPDATE ... WHERE id = ? AND <preconditions>``.

        Returns:
            True if exactly the targeted row was updated, False if the row
            is missing or a precondition no longer holds.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == id, *preconditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except IntegrityError as e:
            raise EntityAlreadyExistsError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Conditional update of {self.model.__name__} failed") from e
        return result.rowcount == 1

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except IntegrityError as e:
            raise RepositoryError(f"{self.model.__name__} is still referenced") from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Delete {self.model.__name__} failed") from e

    def conditional_delete(self, id: str, *preconditions: ColumnElement) -> bool:
        """Delete a row only while the preconditions hold; True if it was deleted."""
        stmt = (
            delete(self.model)
            .where(self.model.id == id, *preconditions)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Conditional delete of {self.model.__name__} failed") from e
        return result.rowcount == 1

    def delete_where(self, *conditions: ColumnElement) -> int:
        """Bulk delete; returns the number of rows removed."""
        stmt = delete(self.model).where(*conditions).execution_options(synchronize_session=False)
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Bulk delete of {self.model.__name__} failed") from e
        return result.rowcount or 0
