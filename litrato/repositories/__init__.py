# litrato/repositories/__init__.py
"""
Repository layer for data access, separating scheduling rules from queries.

Usage:
    from litrato.repositories import RepositoryFactory

    repository = RepositoryFactory.create_conflict_checker_repository(db)
    bookings = repository.get_bookings_for_conflict_check(package_id, event_date)
"""

from .base_repository import BaseRepository
from .booking_request_repository import BookingRequestRepository
from .confirmed_booking_repository import ConfirmedBookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .package_repository import PackageRepository

__all__ = [
    "BaseRepository",
    "BookingRequestRepository",
    "ConfirmedBookingRepository",
    "ConflictCheckerRepository",
    "PackageRepository",
    "RepositoryFactory",
]
