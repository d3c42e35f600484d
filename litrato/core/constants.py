# litrato/core/constants.py
"""
Defaults for the scheduling engine and other shared constants.

These are the fallbacks behind ``SchedulingSettings``; runtime code reads
the settings object, not these names.
"""

BRAND_NAME = "Litrato"

DEFAULT_BUFFER_MINUTES = 120
DEFAULT_EXTENSION_CEILING_HOURS = 2
DEFAULT_DURATION_HOURS = 2
DEFAULT_BUSINESS_HOURS_START = "08:00"
DEFAULT_BUSINESS_HOURS_END = "21:59"
DEFAULT_EXTENSION_HOURLY_RATE = "2000.00"

API_PREFIX = "/api/v1"

CASCADE_REJECTION_NOTE = "Auto-rejected: another request was accepted for this time slot."
