"""Order email — buyer-facing order lifecycle updates."""

from notifications.templates.layout import render_page, value

_HEADINGS = {
    "pending": "Order received",
    "completed": "Payment successful",
    "failed": "Payment failed",
    "cancelled": "Order cancelled",
    "refunded": "Refund processed",
}


class OrderTemplate:
    name = "order-notification"

    @staticmethod
    def render(context: dict) -> str:
        status = context.get("status", "pending")
        license_name = value(context, "license_name", "your license")
        paragraphs = [f"Hi {value(context, 'buyer_name', 'there')},"]

        if context.get("message"):
            paragraphs.append(value(context, "message"))
        if context.get("amount") is not None:
            paragraphs.append(
                f"<strong>{license_name}</strong>: {value(context, 'currency', 'USD')} {value(context, 'amount')}"
            )
        if context.get("order_reference"):
            paragraphs.append(f"Order reference: {value(context, 'order_reference')}")
        if context.get("reason"):
            paragraphs.append(f"Reason: {value(context, 'reason')}")
        if context.get("error_message"):
            paragraphs.append(f"Error: {value(context, 'error_message')}")

        return render_page(
            context,
            f"{_HEADINGS.get(status, 'Order update')} - {license_name}",
            paragraphs,
            action=("dashboard_url", "View your orders"),
        )
