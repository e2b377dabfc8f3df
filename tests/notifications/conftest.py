from datetime import UTC, datetime, timedelta

import pytest
from licensing.user_license import LicenseOption, LicenseOwner, Project, UserLicense
from notifications.channel.fake_email import FakeEmailTransport
from notifications.channel.fake_push import FakePushTransport
from notifications.config import Settings
from notifications.context import build_context
from notifications.queue.base import RetryPolicy
from notifications.queue.memory import InMemoryJobQueue
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        deployhub_env="test",
        smtp_host=None,
        smtp_port=None,
        user_dashboard_url="https://app.test",
        owner_dashboard_url="https://owner.test",
        scheduler_timezone="UTC",
    )


@pytest.fixture
def email_transport():
    return FakeEmailTransport()


@pytest.fixture
def push_transport():
    return FakePushTransport()


@pytest.fixture
def queue():
    return InMemoryJobQueue(retry_policy=RetryPolicy(attempts=3, backoff_ms=0))


@pytest.fixture
def context(settings, queue, email_transport, push_transport):
    """Fully wired pipeline with fake transports and an inline-drainable queue."""
    return build_context(
        settings,
        queue=queue,
        email_transport=email_transport,
        push_transport=push_transport,
        mock_delay=0,
    )


@pytest.fixture
def service(context):
    return context.service


@pytest.fixture
def notifications_repo(context):
    return context.notifications


# ---------------------------------------------------------------------------
# License builders
# ---------------------------------------------------------------------------
def make_user_license(expires_at: datetime | None = None, **overrides) -> UserLicense:
    defaults = {
        "owner": LicenseOwner(id="owner-1", email="owner@example.com", first_name="Ada", last_name="Lovelace"),
        "license": LicenseOption(id="lic-1", name="Pro", projects=[Project(id="proj-1", name="Acme")]),
        "active": True,
        "expires_at": expires_at or datetime.now(UTC) + timedelta(days=30),
    }
    defaults.update(overrides)
    return UserLicense(**defaults)


@pytest.fixture
def user_license_factory():
    return make_user_license
