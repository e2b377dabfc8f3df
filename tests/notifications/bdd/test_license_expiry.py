"""BDD tests for license expiry warnings and deactivation."""

from datetime import UTC, datetime, timedelta

from licensing.user_license import LicenseOption, LicenseOwner, Project, UserLicense
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/license_expiry.feature")

NOW = datetime(2025, 6, 1, 9, 0, tzinfo=UTC)


def _license(name, expires_at):
    return UserLicense(
        owner=LicenseOwner(id="owner-1", email="owner@example.com", first_name="Ada"),
        license=LicenseOption(id="lic-1", name=name, projects=[Project(id="proj-1", name="Acme")]),
        expires_at=expires_at,
    )


@given(
    parsers.cfparse('an active "{name}" license expiring in {days:d} days'),
    target_fixture="user_license",
)
def expiring_license(run, context, name, days):
    user_license = _license(name, NOW + timedelta(days=days, hours=3))
    run(context.user_licenses.save(user_license))
    return user_license


@given(
    parsers.cfparse('an active "{name}" license that expired {hours:d} hours ago'),
    target_fixture="user_license",
)
def expired_license(run, context, name, hours):
    user_license = _license(name, NOW - timedelta(hours=hours))
    run(context.user_licenses.save(user_license))
    return user_license


@when("the expiration warning sweep runs")
def warning_sweep(run, context):
    run(context.expiration.handle_license_expiration_warnings(now=NOW))
    run(context.queue.run_until_empty())


@when("the expired license sweep runs")
def expired_sweep(run, context):
    run(context.expiration.handle_expired_licenses(now=NOW))
    run(context.queue.run_until_empty())


@then("the license is active")
def license_active(run, context, user_license):
    assert run(context.user_licenses.get(user_license.id)).active is True


@then("the license is inactive")
def license_inactive(run, context, user_license):
    assert run(context.user_licenses.get(user_license.id)).active is False
