"""ConflictCheckerRepository error handling with a failing session."""

from datetime import date
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from litrato.core.exceptions import RepositoryException
from litrato.repositories.conflict_checker_repository import ConflictCheckerRepository


@pytest.fixture
def failing_db():
    db = Mock(spec=Session)
    db.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    return db


class TestConflictCheckerRepositoryErrors:
    def test_package_query_failure_is_wrapped(self, failing_db):
        repository = ConflictCheckerRepository(failing_db)

        with pytest.raises(RepositoryException, match="Failed to get conflict bookings"):
            repository.get_bookings_for_conflict_check("pkg", date(2026, 12, 12))

    def test_date_query_failure_is_wrapped(self, failing_db):
        repository = ConflictCheckerRepository(failing_db)

        with pytest.raises(RepositoryException, match="Failed to get bookings"):
            repository.get_bookings_for_date(date(2026, 12, 12))

    def test_programming_errors_are_not_wrapped(self):
        db = Mock(spec=Session)
        db.query.side_effect = TypeError("bad filter")
        repository = ConflictCheckerRepository(db)

        with pytest.raises(TypeError):
            repository.get_bookings_for_date(date(2026, 12, 12))
