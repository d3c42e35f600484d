"""Unit tests for NotificationService email composition and failure handling."""

from datetime import date, time
from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from litrato.models.booking_request import BookingRequest
from litrato.services.notification_service import NotificationService


@pytest.fixture
def transport():
    return Mock()


@pytest.fixture
def service(transport):
    return NotificationService(Mock(spec=Session), email_service=transport)


@pytest.fixture
def request_row():
    return BookingRequest(
        id="01HZY3Q5V1Y3M6W9X8K2J4N7PA",
        event_date=date(2026, 12, 12),
        start_time=time(10, 0),
        customer_name="Ana <Reyes>",
        customer_email="ana@example.com",
        event_name="Reyes Debut",
    )


class TestNotificationService:
    def test_accepted_email(self, service, transport, request_row):
        assert service.notify_request_accepted(request_row) is True

        kwargs = transport.send_email.call_args.kwargs
        assert kwargs["to_email"] == "ana@example.com"
        assert "confirmed" in kwargs["subject"]
        assert "December 12, 2026 at 10:00" in kwargs["html_content"]
        assert "Ana &lt;Reyes&gt;" in kwargs["html_content"]

    def test_rejected_email_includes_reason(self, service, transport, request_row):
        service.notify_request_rejected(request_row, "Booth under repair")

        assert "Reason: Booth under repair" in transport.send_email.call_args.kwargs["html_content"]

    def test_slot_taken_email(self, service, transport, request_row):
        service.notify_slot_taken(request_row)

        assert "no longer available" in transport.send_email.call_args.kwargs["subject"]

    def test_missing_email_is_skipped(self, service, transport, request_row):
        request_row.customer_email = None

        assert service.notify_request_accepted(request_row) is False
        transport.send_email.assert_not_called()

    def test_transport_failure_is_reported_not_raised(self, service, transport, request_row):
        transport.send_email.side_effect = RuntimeError("provider down")

        assert service.notify_request_rejected(request_row) is False


def test_console_transport_used_by_default():
    from litrato.services.email_console import ConsoleEmailService

    service = NotificationService(Mock(spec=Session))

    assert isinstance(service.email_service, ConsoleEmailService)
    assert service.email_service.send_email("a@example.com", "Hi", "<p>Hi</p>") is True
    assert service.email_service.outbox[0].to_email == "a@example.com"


class TestRenderedTemplates:
    def test_rejected_without_reason_omits_reason_line(self, service, transport, request_row):
        service.notify_request_rejected(request_row)

        assert "Reason:" not in transport.send_email.call_args.kwargs["html_content"]

    def test_emails_carry_brand_footer(self, service, transport, request_row):
        service.notify_slot_taken(request_row)

        html = transport.send_email.call_args.kwargs["html_content"]
        assert "December 12, 2026 at 10:00" in html
        assert "Litrato" in html

    def test_render_failure_is_reported_not_raised(self, transport, request_row):
        templates = Mock()
        templates.render_template.side_effect = RuntimeError("bad template")
        service = NotificationService(
            Mock(spec=Session), email_service=transport, template_service=templates
        )

        assert service.notify_request_accepted(request_row) is False
        transport.send_email.assert_not_called()
