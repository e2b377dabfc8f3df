"""Deployment email — deployment lifecycle updates."""

from notifications.templates.layout import render_page, value


class DeploymentTemplate:
    name = "deployment-notification"

    @staticmethod
    def render(context: dict) -> str:
        paragraphs = [value(context, "message", "Your deployment status has changed.")]
        if context.get("environment"):
            paragraphs.append(f"Environment: {value(context, 'environment')}")
        if context.get("error_message"):
            paragraphs.append(f"Error: {value(context, 'error_message')}")
        return render_page(
            context,
            value(context, "title", "Deployment update"),
            paragraphs,
            action=("deployment_url", "Open deployment"),
        )
