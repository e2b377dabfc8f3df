"""Template registry — maps template names to email template classes.

Every scope's default template is registered here; each template
renders an HTML body from the notification's data payload.
"""

from notifications.templates.account import AccountTemplate
from notifications.templates.deployment import DeploymentTemplate
from notifications.templates.license import LicenseTemplate
from notifications.templates.order import OrderTemplate
from notifications.templates.payment import PaymentTemplate
from notifications.templates.project import ProjectTemplate
from notifications.templates.sale import SaleTemplate
from notifications.templates.welcome import WelcomeTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    template.name: template
    for template in (
        DeploymentTemplate,
        PaymentTemplate,
        OrderTemplate,
        SaleTemplate,
        ProjectTemplate,
        LicenseTemplate,
        WelcomeTemplate,
        AccountTemplate,
    )
}


def get_template(name: str):
    """Look up a template class by template name."""
    template_cls = TEMPLATE_REGISTRY.get(name)
    if template_cls is None:
        raise ValueError(f"No template registered for name: {name}")
    return template_cls
