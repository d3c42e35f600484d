# litrato/api/dependencies.py
"""
FastAPI dependency providers for the scheduling services.
"""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import SchedulingSettings, settings
from ..database import get_db as original_get_db
from ..services.availability_service import AvailabilityService
from ..services.booking_acceptance_service import BookingAcceptanceService
from ..services.conflict_checker import ConflictChecker
from ..services.extension_service import BookingExtensionService
from ..services.notification_service import NotificationService
from ..services.pricing_service import ExtensionPricingService


def get_db() -> Generator[Session, None, None]:
    """
    Get database session dependency.

    Yields:
        Database session that will be closed after use
    """
    yield from original_get_db()


def get_scheduling_settings() -> SchedulingSettings:
    return settings.scheduling


def get_conflict_checker(
    db: Session = Depends(get_db),
    config: SchedulingSettings = Depends(get_scheduling_settings),
) -> ConflictChecker:
    return ConflictChecker(db, config)


def get_availability_service(
    db: Session = Depends(get_db),
    config: SchedulingSettings = Depends(get_scheduling_settings),
) -> AvailabilityService:
    return AvailabilityService(db, config)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_booking_acceptance_service(
    db: Session = Depends(get_db),
    config: SchedulingSettings = Depends(get_scheduling_settings),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingAcceptanceService:
    """
    Get acceptance service instance with all dependencies.

    Args:
        db: Database session
        config: Scheduling constants
        notification_service: Notification service for customer emails

    Returns:
        BookingAcceptanceService instance
    """
    return BookingAcceptanceService(db, config, notification_service=notification_service)


def get_extension_service(
    db: Session = Depends(get_db),
    config: SchedulingSettings = Depends(get_scheduling_settings),
) -> BookingExtensionService:
    return BookingExtensionService(db, config)


def get_pricing_service(
    config: SchedulingSettings = Depends(get_scheduling_settings),
) -> ExtensionPricingService:
    return ExtensionPricingService(config)
