"""ConflictChecker against a real session."""

from datetime import date, time

import pytest

from litrato.core.exceptions import NotFoundException, ValidationException
from litrato.services.conflict_checker import ConflictChecker


@pytest.fixture
def checker(db, scheduling_config):
    return ConflictChecker(db, scheduling_config)


class TestCheckNewRequestConflict:
    def test_free_day_has_no_conflict(self, checker, package, event_date):
        assert checker.check_new_request_conflict(package.id, event_date, "10:00") is False

    def test_slot_after_block_is_free(self, checker, package, event_date, make_confirmed):
        make_confirmed("10:00")

        assert checker.check_new_request_conflict(package.id, event_date, "16:00") is False

    def test_slot_inside_block_conflicts(self, checker, package, event_date, make_confirmed):
        make_confirmed("10:00")

        assert checker.check_new_request_conflict(package.id, event_date, "15:59") is True
        assert checker.check_new_request_conflict(package.id, event_date, "13:00") is True

    def test_conflict_reports_slot(self, checker, package, event_date, make_confirmed):
        make_confirmed("10:00")

        conflict = checker.find_slot_conflict(package.id, event_date, "13:00")

        assert conflict.describe() == {"event_date": "2026-12-12", "event_time": "10:00"}

    def test_time_objects_accepted(self, checker, package, event_date, make_confirmed):
        make_confirmed("10:00")

        assert checker.check_new_request_conflict(package.id, event_date, time(13, 0)) is True

    def test_other_package_is_independent(
        self, checker, event_date, make_confirmed, make_package
    ):
        make_confirmed("10:00")
        other = make_package(name="Mirror Booth")

        assert checker.check_new_request_conflict(other.id, event_date, "10:00") is False

    def test_other_date_is_independent(self, checker, package, make_confirmed):
        make_confirmed("10:00")

        assert checker.check_new_request_conflict(package.id, date(2026, 12, 13), "10:00") is False

    def test_pending_requests_are_not_obstacles(self, checker, package, event_date, make_request):
        make_request("10:00")

        assert checker.check_new_request_conflict(package.id, event_date, "10:00") is False

    def test_cancelled_confirmed_booking_is_not_an_obstacle(
        self, checker, package, event_date, make_confirmed
    ):
        make_confirmed("10:00", booking_status="cancelled")

        assert checker.check_new_request_conflict(package.id, event_date, "10:00") is False

    def test_explicit_end_time_extends_reservation(
        self, checker, package, event_date, make_confirmed
    ):
        make_confirmed("18:00")

        # 10:00-14:00 reserves until 16:00, exactly where the 18:00 block starts
        assert checker.check_new_request_conflict(package.id, event_date, "10:00", "14:00") is False
        assert checker.check_new_request_conflict(package.id, event_date, "10:00", "14:01") is True

    def test_invalid_start_time(self, checker, package, event_date):
        with pytest.raises(ValidationException):
            checker.check_new_request_conflict(package.id, event_date, "25:00")

    def test_invalid_end_time(self, checker, package, event_date):
        with pytest.raises(ValidationException):
            checker.check_new_request_conflict(package.id, event_date, "10:00", "noon")

    def test_negative_extension(self, checker, package, event_date):
        with pytest.raises(ValidationException):
            checker.check_new_request_conflict(package.id, event_date, "10:00", extension_hours=-1)

    def test_unknown_package(self, checker, event_date):
        with pytest.raises(NotFoundException):
            checker.check_new_request_conflict("01ARZ3NDEKTSV4RRFFQ69G5FAV", event_date, "10:00")


class TestExtensionConflict:
    def test_one_hour_fits_before_next_booking(self, checker, make_confirmed):
        booking = make_confirmed("10:00")
        make_confirmed("15:00", customer_email="other@example.com")

        assert checker.conflicts_extension(booking, 1) is False

    def test_two_hours_collides(self, checker, make_confirmed):
        booking = make_confirmed("10:00")
        make_confirmed("15:00", customer_email="other@example.com")

        conflict = checker.find_extension_conflict(booking, 2)

        assert conflict is not None
        assert conflict.describe()["event_time"] == "15:00"

    def test_lone_booking_never_conflicts_with_itself(self, checker, make_confirmed):
        booking = make_confirmed("10:00")

        assert checker.conflicts_extension(booking, 2) is False


class TestWindowForRequest:
    def test_uses_package_duration_without_end_time(self, checker, make_package, make_request):
        four_hours = make_package(name="Grand", duration_hours=4)
        request = make_request("10:00", target_package=four_hours)

        window = checker.window_for_request(request)

        assert (window.start_minute, window.core_end_minute) == (600, 840)

    def test_falls_back_to_default_duration(self, checker, make_package, make_request):
        no_duration = make_package(name="Custom", duration_hours=None)
        request = make_request("10:00", target_package=no_duration)

        assert checker.window_for_request(request).core_end_minute == 720

    def test_end_before_start_runs_past_midnight(self, checker, make_request):
        request = make_request("22:00", "01:00")

        assert checker.window_for_request(request).core_end_minute == 1500

    def test_confirmed_override_wins(self, checker, make_confirmed):
        booking = make_confirmed("10:00", "12:00", extension_hours=1, event_end="13:00")

        window = checker.window_for_request(booking.request)

        assert window.core_end_minute == 780
        assert window.extension_hours == 1
