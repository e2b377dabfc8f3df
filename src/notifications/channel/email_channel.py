"""Email delivery channel.

Renders the named template against the notification data and hands the
message to the configured transport. Without a transport (SMTP host or
port not configured) sends are mocked: logged, delayed briefly, and
answered with a synthetic message id.
"""

import asyncio
import json
import time
from html import escape

import structlog

from notifications.channel.email_port import EmailTransport
from notifications.channel.errors import DeliveryError
from notifications.templates import get_template

logger = structlog.get_logger(__name__)

DEFAULT_FROM = "noreply@deployhub.com"


def fallback_html(data: dict) -> str:
    """Generic body used when a template is unknown or fails to render."""
    title = escape(str(data.get("title") or "Notification"))
    message = escape(str(data.get("message") or "No message content provided."))
    raw = escape(json.dumps(data, default=str))
    return f"<html><body><h1>{title}</h1><p>{message}</p><hr><p>Data: {raw}</p></body></html>"


def render_template(name: str, data: dict) -> str:
    try:
        return get_template(name).render(data)
    except Exception as exc:
        logger.error("Failed to render email template", template=name, error=str(exc))
        return fallback_html(data)


class EmailChannel:
    def __init__(
        self,
        transport: EmailTransport | None = None,
        default_from: str = DEFAULT_FROM,
        mock_delay: float = 0.1,
    ):
        self.transport = transport
        self.default_from = default_from
        self.mock_delay = mock_delay

    @property
    def is_mock(self) -> bool:
        return self.transport is None

    async def send(
        self,
        to: str,
        subject: str,
        text: str | None = None,
        html: str | None = None,
        template: str | None = None,
        template_data: dict | None = None,
        attachments: list[dict] | None = None,
        from_email: str | None = None,
    ) -> dict:
        """Send one email.

        Returns:
            dict with keys success, message_id, recipient

        Raises:
            DeliveryError: the transport rejected the message.
        """
        logger.debug("Sending email", to=to, subject=subject)

        if template and not html:
            html = render_template(template, template_data or {})

        if self.transport is None:
            return await self._mock_send(to, subject, text, template)

        message = {
            "from": from_email or self.default_from,
            "to": to,
            "subject": subject,
            "text": text,
            "html": html,
            "attachments": attachments or [],
        }
        try:
            info = await self.transport.send_mail(message)
        except Exception as exc:
            logger.error("Failed to send email", to=to, error=str(exc))
            raise DeliveryError(f"Failed to send email: {exc}") from exc

        logger.info("Email sent", to=to, message_id=info["message_id"])
        return {"success": True, "message_id": info["message_id"], "recipient": to}

    async def _mock_send(self, to: str, subject: str, text: str | None, template: str | None) -> dict:
        logger.info(
            "SMTP transport not configured, mocking email",
            to=to,
            subject=subject,
            template=template or "N/A",
            text=(text or "")[:50],
        )
        await asyncio.sleep(self.mock_delay)
        return {
            "success": True,
            "message_id": f"mock-email-{int(time.time() * 1000)}",
            "recipient": to,
        }
