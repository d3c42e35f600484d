# litrato/services/notification_service.py
"""
Customer notifications for booking request outcomes.

Notifications are sent after the scheduling transaction has committed and
are best-effort: a failed send is logged and reported as False, never
raised, so email problems cannot undo an accept or reject.
"""

import logging
from typing import Optional, Protocol, Union

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import BRAND_NAME
from ..models.booking_request import BookingRequest
from .base import BaseService
from .email import EmailService
from .email_console import ConsoleEmailService
from .template_service import TemplateService

logger = logging.getLogger(__name__)


class EmailTransport(Protocol):
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> object:
        ...


def build_email_transport(db: Session) -> Union[EmailService, ConsoleEmailService]:
    """Pick the configured email provider."""
    if settings.email_provider == "resend":
        return EmailService(db)
    return ConsoleEmailService()


class NotificationService(BaseService):
    """Renders and sends booking request emails."""

    def __init__(
        self,
        db: Session,
        email_service: Optional[EmailTransport] = None,
        template_service: Optional[TemplateService] = None,
    ):
        super().__init__(db)
        self.email_service = email_service or build_email_transport(db)
        self.template_service = template_service or TemplateService(db)

    def notify_request_accepted(self, request: BookingRequest) -> bool:
        subject = f"{BRAND_NAME}: your booking is confirmed"
        return self._send(request, subject, "email/request_accepted.html")

    def notify_request_rejected(self, request: BookingRequest, reason: Optional[str] = None) -> bool:
        subject = f"{BRAND_NAME}: booking request update"
        return self._send(request, subject, "email/request_rejected.html", reason=reason)

    def notify_slot_taken(self, request: BookingRequest) -> bool:
        """Tell a customer their pending request lost the slot to another booking."""
        subject = f"{BRAND_NAME}: requested time is no longer available"
        return self._send(request, subject, "email/slot_taken.html")

    def _send(self, request: BookingRequest, subject: str, template_name: str, **context) -> bool:
        if not request.customer_email:
            self.logger.debug(f"No email on request {request.id}; skipping notification")
            return False
        try:
            html_content = self.template_service.render_template(
                template_name, {"request": request, "subject": subject, **context}
            )
            self.email_service.send_email(
                to_email=request.customer_email,
                subject=subject,
                html_content=html_content,
            )
            return True
        except Exception as e:
            self.logger.error(
                f"Failed to notify {request.customer_email} about request {request.id}: {str(e)}"
            )
            return False
