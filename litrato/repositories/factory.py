# litrato/repositories/factory.py
"""
Single place where services obtain repositories.

Imports are local to each method so models and repositories can import
each other's modules without cycles at load time.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from .booking_request_repository import BookingRequestRepository
    from .confirmed_booking_repository import ConfirmedBookingRepository
    from .conflict_checker_repository import ConflictCheckerRepository
    from .package_repository import PackageRepository


class RepositoryFactory:
    @staticmethod
    def create_booking_request_repository(db: Session) -> "BookingRequestRepository":
        """Status transitions of booking requests."""
        from .booking_request_repository import BookingRequestRepository

        return BookingRequestRepository(db)

    @staticmethod
    def create_confirmed_booking_repository(db: Session) -> "ConfirmedBookingRepository":
        """Confirmed bookings and their extension fields."""
        from .confirmed_booking_repository import ConfirmedBookingRepository

        return ConfirmedBookingRepository(db)

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Accepted bookings used as obstacles."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_package_repository(db: Session) -> "PackageRepository":
        from .package_repository import PackageRepository

        return PackageRepository(db)
