"""BDD tests for notification lifecycle."""

from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/notification_lifecycle.feature")


@given(
    parsers.cfparse('a pending "{notification_type}" notification for user "{user_id}"'),
    target_fixture="notification",
)
def pending_notification(run, context, notification_type, user_id):
    payload = {"type": notification_type, "user_id": user_id, "message": "Your deployment is ready"}
    return run(context.service.create(payload))


@when("the queue is processed")
def process_queue(run, context):
    run(context.queue.run_until_empty())


@when("the user marks the notification as read", target_fixture="notification")
def mark_read(run, context, notification):
    return run(context.service.mark_as_read(notification.id))


@then(parsers.cfparse('the notification status is "{status}"'))
def notification_status_is(run, context, notification, status):
    assert run(context.service.find_one(notification.id)).status == status


@then(parsers.cfparse('the notification error is "{error}"'))
def notification_error_is(run, context, notification, error):
    assert run(context.service.find_one(notification.id)).error == error


@then("the notification is read")
def notification_is_read(notification):
    assert notification.read is True
    assert notification.read_at is not None


@then(parsers.cfparse('user "{user_id}" has {count:d} unread notifications'))
def unread_count(run, context, user_id, count):
    assert run(context.service.count_unread(user_id)) == {"count": count}
