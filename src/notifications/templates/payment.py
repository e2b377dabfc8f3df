"""Payment email — payment receipts and payment failures."""

from notifications.templates.layout import render_page, value


class PaymentTemplate:
    name = "payment-notification"

    @staticmethod
    def render(context: dict) -> str:
        license_name = value(context, "license_name", "your license")
        if context.get("status") == "failed":
            heading = f"Payment failed - {license_name}"
            paragraphs = [
                f"We could not process your payment for <strong>{license_name}</strong>.",
                f"Error: {value(context, 'error_message', 'unknown error')}",
                "Please try again or contact support.",
            ]
        else:
            heading = f"Payment received - {license_name}"
            paragraphs = [
                f"We received {value(context, 'currency', 'USD')} {value(context, 'amount', '0')} "
                f"for <strong>{license_name}</strong>.",
                f"Payment reference: {value(context, 'payment_id', 'N/A')}",
            ]
        return render_page(context, heading, paragraphs, action=("dashboard_url", "View payment"))
