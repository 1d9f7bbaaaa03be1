"""Outbound notification port."""

from abc import ABC, abstractmethod


class INotificationSink(ABC):
    """Accepts notifications for delivery.

    Queueing and retry semantics belong to the implementation; callers only
    need the returned delivery handle for correlation.
    """

    @abstractmethod
    async def send_password_reset_email(self, recipient_email: str, reset_token: str) -> str:
        """Queues a password-reset email.

        Args:
            recipient_email: Address of the account owner.
            reset_token: Identifier of the reset token to embed in the email.

        Returns:
            An opaque delivery handle.
        """
        raise NotImplementedError
