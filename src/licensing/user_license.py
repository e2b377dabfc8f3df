"""User-license records read and updated by the expiration sweeps.

A user license grants its owner access to a license option, which in
turn covers one or more projects. Owner and license are optional
because the Licensing module may return partially loaded rows.
"""

from protean.fields import Boolean, DateTime, List, String, ValueObject

from notifications.domain import notifications


@notifications.value_object(part_of="UserLicense")
class LicenseOwner:
    id: String(max_length=50, required=True)
    email: String(max_length=254, required=True, sanitize=False)
    first_name: String(max_length=100)
    last_name: String(max_length=100)

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or "User"


@notifications.value_object(part_of="UserLicense")
class Project:
    id: String(max_length=50, required=True)
    name: String(max_length=200, sanitize=False)


@notifications.value_object(part_of="UserLicense")
class LicenseOption:
    id: String(max_length=50, required=True)
    name: String(max_length=200, sanitize=False)
    projects: List(content_type=ValueObject(Project))


@notifications.aggregate
class UserLicense:
    owner: ValueObject(LicenseOwner)
    license: ValueObject(LicenseOption)
    active: Boolean(default=True)
    expires_at: DateTime()

    # Not ``license_name``: the embedded option already flattens to that attribute
    @property
    def license_title(self) -> str:
        return (self.license.name if self.license else None) or "your license"

    @property
    def project_title(self) -> str:
        projects = self.license.projects if self.license else []
        return (projects[0].name if projects else None) or "your project"
