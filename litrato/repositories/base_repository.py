# litrato/repositories/base_repository.py
"""
Shared repository plumbing.

Repositories flush but never commit: the calling service's
``transaction()`` decides when work becomes visible. SQLAlchemy errors are
logged here and re-raised as RepositoryException so services never see
driver exceptions.
"""

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """Lookups and inserts for one mapped model; subclasses add the real queries."""

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """
        Fetch a row by primary key.

        With ``load_relationships`` the subclass's eager loads are applied, so
        callers can walk to related rows without extra queries.
        """
        try:
            query = self.db.query(self.model).filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}")

    def create(self, **kwargs) -> T:
        """
        Add a row and flush so its id and defaults are populated.

        Raises:
            RepositoryException: ``integrity_error`` is set when a unique or
                check constraint rejected the row
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()
            return entity
        except IntegrityError as e:
            self.logger.warning(f"Constraint rejected new {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(
                f"Integrity constraint violated: {str(e)}", integrity_error=True
            ) from e
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}")

    def find_one_by(self, **filters) -> Optional[T]:
        try:
            return self.db.query(self.model).filter_by(**filters).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error finding {self.model.__name__} by {filters}: {str(e)}")
            raise RepositoryException(f"Failed to find {self.model.__name__}: {str(e)}")

    def _apply_eager_loading(self, query: Query) -> Query:
        """Hook for subclasses: add ``joinedload`` options for ``get_by_id``."""
        return query

    def _execute_scalar(self, query: Query) -> Any:
        try:
            return query.scalar()
        except SQLAlchemyError as e:
            self.logger.error(f"Scalar query on {self.model.__name__} failed: {str(e)}")
            raise RepositoryException(f"Scalar query failed: {str(e)}")
