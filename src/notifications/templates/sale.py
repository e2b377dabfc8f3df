"""Sale email — tells a license owner about a purchase."""

from notifications.templates.layout import render_page, value


class SaleTemplate:
    name = "sale-notification"

    @staticmethod
    def render(context: dict) -> str:
        license_name = value(context, "license_name", "your license")
        return render_page(
            context,
            f"New sale - {license_name}",
            [
                f"Hi {value(context, 'owner_name', 'there')},",
                f"{value(context, 'buyer_name', 'A customer')} just purchased <strong>{license_name}</strong> "
                f"for {value(context, 'currency', 'USD')} {value(context, 'amount', '0')}.",
            ],
            action=("dashboard_url", "View your sales"),
        )
