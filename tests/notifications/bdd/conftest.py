"""Shared BDD fixtures and step definitions for the Notifications pipeline."""

import asyncio

import pytest
from pytest_bdd import given, parsers, then


@pytest.fixture()
def run():
    """Run a coroutine to completion on a loop owned by the scenario."""
    with asyncio.Runner() as runner:
        yield runner.run


async def _all(service):
    return (await service.find_all({"limit": 100})).items


# ---------------------------------------------------------------------------
# Given steps — devices
# ---------------------------------------------------------------------------
@given(parsers.cfparse('user "{user_id}" has registered the device token "{token}"'))
def registered_device(run, context, user_id, token):
    run(context.tokens_service.create(user_id, token))


# ---------------------------------------------------------------------------
# Then steps — notifications
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{count:d} notifications are created"))
def notifications_created(run, context, count):
    assert len(run(_all(context.service))) == count


@then(parsers.cfparse('every notification is "{status}"'))
def every_notification_is(run, context, status):
    assert {n.status for n in run(_all(context.service))} == {status}


@then(parsers.cfparse('the "{notification_type}" notification for "{user_id}" is "{status}"'))
def notification_for_user_is(run, context, notification_type, user_id, status):
    matches = [n for n in run(_all(context.service)) if n.type == notification_type and n.user_id == user_id]
    assert len(matches) == 1
    assert matches[0].status == status


# ---------------------------------------------------------------------------
# Then steps — deliveries
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{address}" receives an email with subject "{subject}"'))
def receives_email(email_transport, address, subject):
    subjects = [e["subject"] for e in email_transport.sent_emails if e["to"] == address]
    assert subject in subjects, f"Emails to {address}: {subjects}"


@then(parsers.cfparse('only "{address}" receives an email'))
def only_address_receives_email(email_transport, address):
    assert {e["to"] for e in email_transport.sent_emails} == {address}


@then(parsers.cfparse('device "{token}" receives a push titled "{title}"'))
def device_receives_push(push_transport, token, title):
    assert any(
        token in call["tokens"] and call["notification"]["title"] == title for call in push_transport.multicast_calls
    ), f"Pushes: {push_transport.multicast_calls}"
