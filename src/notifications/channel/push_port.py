"""Push notification channel port — abstract interface for push transports."""

from abc import ABC, abstractmethod


class PushTransport(ABC):
    """Abstract interface for push messaging transports."""

    @abstractmethod
    async def send(self, message: dict) -> str:
        """Send to one device.

        Args:
            message: dict with keys token, notification ({title, body}), data

        Returns:
            The provider's message id.
        """
        ...

    @abstractmethod
    async def send_each_for_multicast(self, message: dict) -> dict:
        """Send to several devices.

        Args:
            message: dict with keys tokens, notification ({title, body}), data

        Returns:
            dict with keys success_count, failure_count, responses (one per
            token: {success, message_id} or {success, error})
        """
        ...
