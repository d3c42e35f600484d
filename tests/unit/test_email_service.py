"""Unit tests for the Resend email transport."""

from unittest.mock import Mock, patch

import pytest
from sqlalchemy.orm import Session

from litrato.core.exceptions import ServiceException
from litrato.services.email import EmailService, html_to_text


def test_requires_api_key(monkeypatch):
    monkeypatch.setattr("litrato.services.email.settings.resend_api_key", "")

    with pytest.raises(ServiceException):
        EmailService(Mock(spec=Session))


def test_send_builds_resend_payload():
    service = EmailService(
        Mock(spec=Session),
        api_key="re_test",
        from_email="Litrato <bookings@litrato.ph>",
        reply_to="events@litrato.ph",
    )

    with patch("resend.Emails.send", return_value={"id": "email-1"}) as send:
        response = service.send_email("ana@example.com", "Hello", "<p>Your   booking</p>")

    assert response == {"id": "email-1"}
    payload = send.call_args.args[0]
    assert payload["from"] == "Litrato <bookings@litrato.ph>"
    assert payload["to"] == ["ana@example.com"]
    assert payload["text"] == "Your booking"
    assert payload["reply_to"] == "events@litrato.ph"


def test_provider_error_becomes_service_exception():
    service = EmailService(Mock(spec=Session), api_key="re_test")

    with patch("resend.Emails.send", side_effect=RuntimeError("rate limited")):
        with pytest.raises(ServiceException):
            service.send_email("ana@example.com", "Hello", "<p>Hi</p>")


def test_html_to_text_keeps_paragraphs():
    html = "<p>Hi Ana &amp; Ben,</p><p>Your booking is <strong>confirmed</strong>.</p>"

    assert html_to_text(html) == "Hi Ana & Ben,\nYour booking is confirmed."
