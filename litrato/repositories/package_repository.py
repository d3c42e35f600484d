# litrato/repositories/package_repository.py
"""Package Repository: read access to the rentable packages."""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.package import Package
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PackageRepository(BaseRepository[Package]):
    def __init__(self, db: Session):
        super().__init__(db, Package)

    def get_active_packages(self) -> List[Package]:
        """Active packages ordered by name."""
        try:
            return (
                self.db.query(Package)
                .filter(Package.is_active.is_(True))
                .order_by(Package.name, Package.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting active packages: {str(e)}")
            raise RepositoryException(f"Failed to get packages: {str(e)}")
