"""Tests for notification enums and the scope → template mapping."""

import pytest
from notifications.notification.notification import (
    SCOPE_TEMPLATES,
    NotificationScope,
    NotificationStatus,
    NotificationType,
    template_for_scope,
)
from notifications.templates import TEMPLATE_REGISTRY


class TestNotificationType:
    def test_values(self):
        assert {t.value for t in NotificationType} == {"EMAIL", "SMS", "SYSTEM"}


class TestNotificationStatus:
    def test_values(self):
        assert {s.value for s in NotificationStatus} == {"pending", "processing", "delivered", "failed"}


class TestScopeTemplates:
    @pytest.mark.parametrize(
        "scope,template",
        [
            (NotificationScope.DEPLOYMENT, "deployment-notification"),
            (NotificationScope.PAYMENT, "payment-notification"),
            (NotificationScope.ORDER, "order-notification"),
            (NotificationScope.SALE, "sale-notification"),
            (NotificationScope.PROJECTS, "project-notification"),
            (NotificationScope.LICENSES, "license-notification"),
            (NotificationScope.WELCOME, "welcome-notification"),
            (NotificationScope.ACCOUNT, "account-notification"),
        ],
    )
    def test_each_scope_maps_to_its_template(self, scope, template):
        assert template_for_scope(scope.value) == template

    def test_every_scope_is_mapped(self):
        assert set(SCOPE_TEMPLATES) == {s.value for s in NotificationScope}

    def test_every_mapped_template_is_registered(self):
        assert set(SCOPE_TEMPLATES.values()) <= set(TEMPLATE_REGISTRY)

    def test_no_scope_means_no_template(self):
        assert template_for_scope(None) is None
