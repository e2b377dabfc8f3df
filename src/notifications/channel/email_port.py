"""Email channel port — abstract interface for mail transports."""

from abc import ABC, abstractmethod


class EmailTransport(ABC):
    """Abstract interface for email transports (SMTP, provider APIs, fakes)."""

    @abstractmethod
    async def send_mail(self, message: dict) -> dict:
        """Hand one message to the mail server.

        Args:
            message: dict with keys from, to, subject, html, text, attachments

        Returns:
            dict with key message_id
        """
        ...
