"""Project email — moderation outcomes for project owners."""

from notifications.templates.layout import render_page, value


class ProjectTemplate:
    name = "project-notification"

    @staticmethod
    def render(context: dict) -> str:
        project_name = value(context, "project_name", "your project")
        paragraphs = [
            f"Hi {value(context, 'owner_name', 'there')},",
            value(context, "message") if context.get("message") else f"There is an update on {project_name}.",
        ]
        if context.get("note"):
            paragraphs.append(f"Reviewer note: <em>{value(context, 'note')}</em>")
        return render_page(
            context,
            f"{project_name}: {value(context, 'title', 'moderation update')}",
            paragraphs,
            action=("dashboard_url", "View project"),
        )
