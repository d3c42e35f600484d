# litrato/services/email.py
"""
Resend email transport.

Selected with ``EMAIL_PROVIDER=resend``. It only delivers messages: the
subjects and bodies come from NotificationService, which also decides what
to do when a send fails.
"""

from html import unescape
import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
import resend

from ..core.config import settings
from ..core.exceptions import ServiceException
from .base import BaseService

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_BLOCK_END_RE = re.compile(r"</p>|<br\s*/?>", re.IGNORECASE)


def html_to_text(html_content: str) -> str:
    """Plain-text alternative: one line per paragraph, tags and entities removed."""
    text = _BLOCK_END_RE.sub("\n", html_content)
    text = unescape(_TAG_RE.sub("", text))
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


class EmailService(BaseService):
    def __init__(
        self,
        db: Session,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        reply_to: Optional[str] = None,
    ):
        super().__init__(db)

        api_key = api_key or settings.resend_api_key
        if not api_key:
            raise ServiceException("Resend API key not configured")

        resend.api_key = api_key
        self.from_email = from_email or settings.from_email
        self.reply_to = reply_to

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Deliver one message through Resend.

        Returns:
            The Resend API response (contains the message id)

        Raises:
            ServiceException: the provider rejected the message or was unreachable
        """
        params: Dict[str, Any] = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
            "text": text_content or html_to_text(html_content),
            "tags": [{"name": "category", "value": "booking_request"}],
        }
        if self.reply_to:
            params["reply_to"] = self.reply_to

        try:
            response = resend.Emails.send(params)
        except Exception as e:
            error_msg = str(e) or type(e).__name__
            self.logger.error(f"Resend rejected email to {to_email} ({subject!r}): {error_msg}")
            raise ServiceException(f"Email sending failed: {error_msg}") from e

        self.logger.info(f"Email sent to {to_email}: {subject!r}")
        return response
