"""License email — expiry warnings and expiry notices."""

from notifications.templates.layout import render_page, value


class LicenseTemplate:
    name = "license-notification"

    @staticmethod
    def render(context: dict) -> str:
        license_name = value(context, "license_name", "your license")
        project_name = value(context, "project_name", "your project")

        if context.get("status") == "expired":
            heading = f"License expired - {license_name}"
            lead = f"Your license for <strong>{license_name}</strong> ({project_name}) has expired."
        elif context.get("days_remaining") == 1:
            heading = f"License expires tomorrow - {license_name}"
            lead = f"Your license for <strong>{license_name}</strong> ({project_name}) expires tomorrow."
        else:
            days = value(context, "days_remaining", "a few")
            heading = f"License expiring soon - {license_name}"
            lead = f"Your license for <strong>{license_name}</strong> ({project_name}) will expire in {days} days."

        paragraphs = [f"Hi {value(context, 'owner_name', 'there')},", lead]
        if context.get("expires_at"):
            paragraphs.append(f"Expiry date: {value(context, 'expires_at')}")
        return render_page(context, heading, paragraphs, action=("renew_url", "Renew license"))
