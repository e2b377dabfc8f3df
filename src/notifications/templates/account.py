"""Account email — generic account notices."""

from notifications.templates.layout import render_page, value


class AccountTemplate:
    name = "account-notification"

    @staticmethod
    def render(context: dict) -> str:
        return render_page(
            context,
            value(context, "title", "Account update"),
            [value(context, "message", "There has been a change to your account.")],
            action=("dashboard_url", "Review your account"),
        )
