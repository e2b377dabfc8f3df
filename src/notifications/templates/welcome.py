"""Welcome email — sent when a user registers."""

from notifications.templates.layout import render_page, value


class WelcomeTemplate:
    name = "welcome-notification"

    @staticmethod
    def render(context: dict) -> str:
        first_name = value(context, "first_name", "there")
        return render_page(
            context,
            f"Welcome to Deploy Hub, {first_name}!",
            [
                f"Hi {first_name},",
                "Thank you for joining Deploy Hub. Browse the marketplace, "
                "buy a license and deploy your first project in minutes.",
            ],
            action=("dashboard_url", "Open your dashboard"),
        )
