"""SMS delivery channel.

No SMS provider is wired in; messages are logged and acknowledged after
a short simulated delay.
"""

import asyncio
import time

import structlog

logger = structlog.get_logger(__name__)


class SmsChannel:
    def __init__(self, mock_delay: float = 0.1):
        self.mock_delay = mock_delay

    async def send(
        self,
        to: str,
        message: str,
        from_number: str | None = None,
        media_urls: list[str] | None = None,
    ) -> dict:
        logger.info(
            "SMS would be sent",
            to=to,
            from_number=from_number or "default",
            message=message[:50],
            media_urls=media_urls or [],
        )
        await asyncio.sleep(self.mock_delay)
        return {
            "success": True,
            "message_id": f"mock-sms-{int(time.time() * 1000)}",
            "recipient": to,
            "status": "sent",
        }

    def verify_phone_number(self, phone_number: str) -> dict:
        logger.debug("Verifying phone number", phone_number=phone_number)
        return {"success": True, "valid": True, "phone_number": phone_number}
