"""Notifications bounded context: asynchronous multi-channel dispatch for Deploy Hub.

Consumes events from the Users, Orders, Deployments and Moderation
modules, records one notification per message and hands it to a work
queue whose worker delivers it over email, SMS or push. Also owns the
device tokens push delivery targets and the license-expiration sweeps.
"""

import structlog
from protean.domain import Domain

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
