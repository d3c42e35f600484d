# litrato/services/email_console.py
"""
Development email transport.

Selected with ``EMAIL_PROVIDER=console``: messages are written to the log
and kept in ``outbox`` so local runs can inspect what a customer would have
received.
"""

from dataclasses import dataclass
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class OutboxMessage:
    to_email: str
    subject: str
    html_content: str
    text_content: Optional[str] = None


class ConsoleEmailService:
    def __init__(self) -> None:
        self.outbox: List[OutboxMessage] = []

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> bool:
        self.outbox.append(OutboxMessage(to_email, subject, html_content, text_content))
        logger.info(f"[console email] to={to_email} subject={subject!r}")
        return True
