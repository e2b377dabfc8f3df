"""Event contracts published by the Deployments module."""

from typing import ClassVar

from shared.events.base import DomainEvent


class DeploymentCreated(DomainEvent):
    event_name: ClassVar[str] = "deployment.created"

    deployment_id: str
    user_id: str
    project_id: str | None = None
    environment: str | None = None
    is_project_owner: bool = False
    is_test_deployment: bool = False


class DeploymentCompleted(DomainEvent):
    event_name: ClassVar[str] = "deployment.completed"

    deployment_id: str
    user_id: str
    deployment_url: str | None = None
    project_id: str | None = None
    environment: str | None = None
    is_project_owner: bool = False


class DeploymentFailed(DomainEvent):
    event_name: ClassVar[str] = "deployment.failed"

    deployment_id: str
    user_id: str
    error_message: str
