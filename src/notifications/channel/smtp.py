"""SMTP email transport.

``smtplib`` is blocking, so every send runs in a worker thread via
``asyncio.to_thread`` to keep the event loop free.
"""

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

import structlog

from notifications.channel.email_port import EmailTransport

logger = structlog.get_logger(__name__)


class SmtpEmailTransport(EmailTransport):
    def __init__(
        self,
        host: str,
        port: int,
        user: str | None = None,
        password: str | None = None,
        use_ssl: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            if not self.use_ssl and server.has_extn("starttls"):
                server.starttls()
            if self.user and self.password:
                server.login(self.user, self.password)
        except Exception:
            server.quit()
            raise
        return server

    def _build(self, message: dict) -> EmailMessage:
        email = EmailMessage()
        email["Subject"] = message.get("subject") or ""
        email["From"] = message["from"]
        email["To"] = message["to"]
        email["Message-ID"] = make_msgid(domain=message["from"].rpartition("@")[2] or None)
        email.set_content(message.get("text") or "")
        if message.get("html"):
            email.add_alternative(message["html"], subtype="html")
        for attachment in message.get("attachments") or []:
            email.add_attachment(
                attachment["content"],
                maintype="application",
                subtype="octet-stream",
                filename=attachment.get("filename"),
            )
        return email

    def _send_blocking(self, message: dict) -> dict:
        email = self._build(message)
        with self._connect() as server:
            server.send_message(email)
        return {"message_id": email["Message-ID"]}

    async def send_mail(self, message: dict) -> dict:
        result = await asyncio.to_thread(self._send_blocking, message)
        logger.debug("SMTP message accepted", to=message["to"], message_id=result["message_id"])
        return result
