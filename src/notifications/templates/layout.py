"""Shared HTML scaffolding for email templates."""

from datetime import UTC, datetime
from html import escape


def value(context: dict, key: str, default: str = "") -> str:
    """Return ``context[key]`` as escaped text, or ``default`` when missing or empty."""
    raw = context.get(key)
    if raw is None or raw == "":
        return escape(default)
    return escape(str(raw))


def button(url: str, label: str) -> str:
    return (
        f'<p style="margin:24px 0"><a href="{url}" '
        'style="background:#2563eb;color:#fff;padding:10px 18px;border-radius:4px;text-decoration:none">'
        f"{escape(label)}</a></p>"
    )


def render_page(context: dict, heading: str, paragraphs: list[str], action: tuple[str, str] | None = None) -> str:
    """Wrap a pre-escaped heading and paragraphs in the Deploy Hub email layout.

    ``action`` is an optional ``(url_key, label)`` pair; the button is
    only drawn when the context carries that URL.
    """
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    if action is not None:
        url_key, label = action
        if context.get(url_key):
            body += button(value(context, url_key), label)

    year = value(context, "year", str(datetime.now(UTC).year))
    return (
        "<html><body style=\"font-family:Arial,sans-serif;color:#111827\">"
        f"<h1>{heading}</h1>"
        f"{body}"
        "<hr>"
        f"<p style=\"font-size:12px;color:#6b7280\">&copy; {year} Deploy Hub</p>"
        "</body></html>"
    )
