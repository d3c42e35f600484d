"""Unit tests for scheduling configuration."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from litrato.core.config import SchedulingSettings


class TestSchedulingSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "SCHEDULING_BUFFER_MINUTES",
            "SCHEDULING_EXTENSION_CEILING_HOURS",
            "SCHEDULING_BUSINESS_HOURS_START",
            "SCHEDULING_BUSINESS_HOURS_END",
        ):
            monkeypatch.delenv(name, raising=False)

        config = SchedulingSettings()

        assert config.buffer_minutes == 120
        assert config.extension_ceiling_hours == 2
        assert config.default_duration_hours == 2
        assert config.business_start_minutes == 480
        assert config.business_end_minutes == 1319
        assert config.extension_hourly_rate == Decimal("2000.00")
        assert config.enforce_buffer_on_accept is True
        assert config.buffer_hours == 2

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("SCHEDULING_BUFFER_MINUTES", "90")
        monkeypatch.setenv("SCHEDULING_BUSINESS_HOURS_END", "20:00")

        config = SchedulingSettings()

        assert config.buffer_minutes == 90
        assert config.business_end_minutes == 1200

    def test_rejects_malformed_business_hours(self):
        with pytest.raises(ValidationError):
            SchedulingSettings(business_hours_start="8am")

    def test_rejects_inverted_business_hours(self):
        with pytest.raises(ValidationError):
            SchedulingSettings(business_hours_start="22:00", business_hours_end="08:00")

    def test_rejects_negative_buffer(self):
        with pytest.raises(ValidationError):
            SchedulingSettings(buffer_minutes=-1)

    def test_settings_are_immutable(self):
        config = SchedulingSettings()
        with pytest.raises(ValidationError):
            config.buffer_minutes = 30
