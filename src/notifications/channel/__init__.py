"""Channel registry — builds the delivery channels from settings.

Email uses SMTP when ``SMTP_HOST`` and ``SMTP_PORT`` are set and runs in
mock mode otherwise. Push uses the logging transport unless a real
transport is supplied. Tests pass the fake transports from
``fake_email`` and ``fake_push``.
"""

from dataclasses import dataclass

from notifications.channel.email_channel import EmailChannel
from notifications.channel.email_port import EmailTransport
from notifications.channel.push_channel import LoggingPushTransport, PushChannel
from notifications.channel.push_port import PushTransport
from notifications.channel.sms_channel import SmsChannel
from notifications.channel.smtp import SmtpEmailTransport
from notifications.config import Settings


@dataclass
class Channels:
    email: EmailChannel
    sms: SmsChannel
    push: PushChannel


def build_email_transport(settings: Settings) -> EmailTransport | None:
    if not settings.smtp_configured:
        return None
    return SmtpEmailTransport(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        use_ssl=settings.smtp_use_ssl,
    )


def build_channels(
    settings: Settings,
    email_transport: EmailTransport | None = None,
    push_transport: PushTransport | None = None,
    mock_delay: float = 0.1,
) -> Channels:
    """Return the channel set, using explicit transports where given."""
    return Channels(
        email=EmailChannel(
            transport=email_transport or build_email_transport(settings),
            default_from=settings.smtp_from_email,
            mock_delay=mock_delay,
        ),
        sms=SmsChannel(mock_delay=mock_delay),
        push=PushChannel(push_transport or LoggingPushTransport()),
    )
