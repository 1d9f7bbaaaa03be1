"""Notification sink that records password-reset emails in the structured log.

This is a development placeholder: nothing is delivered and the reset token
is not written to the log, so a deployment needs a real sink before users can
complete the forgot-password flow.

The message envelope matches what a mail worker consumes (recipient, subject,
template and template params), so a queue-backed sink can replace this one
without touching the domain layer.
"""

import uuid
from typing import Any, Dict

import structlog

from warden.core.logging import mask_email
from warden.domain.interfaces.notifications import INotificationSink

logger = structlog.get_logger(__name__)

PASSWORD_RESET_SUBJECT = "Forgot Password"
PASSWORD_RESET_TEMPLATE = "forgot-password"


def build_password_reset_message(recipient_email: str, reset_token: str) -> Dict[str, Any]:
    return {
        "to": recipient_email,
        "subject": PASSWORD_RESET_SUBJECT,
        "template": PASSWORD_RESET_TEMPLATE,
        "params": {"reset_password_token": reset_token},
    }


class LoggingNotificationSink(INotificationSink):
    """Logs each message instead of delivering it.

    The returned handle identifies the log entry only; no mail is sent.

    Attributes:
        topic: Logical destination recorded with every message.
    """

    def __init__(self, topic: str = "password-reset-emails"):
        self.topic = topic

    async def send_password_reset_email(self, recipient_email: str, reset_token: str) -> str:
        message = build_password_reset_message(recipient_email, reset_token)
        handle = str(uuid.uuid4())
        logger.info(
            "notification_logged",
            topic=self.topic,
            handle=handle,
            to=mask_email(recipient_email),
            subject=message["subject"],
            template=message["template"],
        )
        return handle
