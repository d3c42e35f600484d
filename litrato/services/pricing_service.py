# litrato/services/pricing_service.py
"""
Extension pricing.

The scheduling services only decide whether an extension fits; what it
costs is decided here, from the configured hourly rate.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.config import SchedulingSettings, settings


class ExtensionPricingService:
    """Flat hourly pricing for booking extensions."""

    def __init__(self, config: Optional[SchedulingSettings] = None):
        self.config = config or settings.scheduling

    @property
    def hourly_rate(self) -> Decimal:
        return Decimal(self.config.extension_hourly_rate)

    def extension_amount(self, hours: int) -> Decimal:
        """Price of ``hours`` extension hours."""
        if hours < 0:
            raise ValueError("hours cannot be negative")
        return (self.hourly_rate * hours).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def amount_due_for_change(self, previous_hours: int, new_hours: int) -> Decimal:
        """Additional charge (negative for a refund) when the extension changes."""
        return self.extension_amount(new_hours) - self.extension_amount(previous_hours)
