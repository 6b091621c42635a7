"""
Event handlers for domain events.

These handlers run in-process on the global event bus for side effects
such as audit logging and business metrics.
"""

import logging

from accounts.domain.events import (
    EmailConfirmed,
    PasswordChanged,
    PasswordResetCompleted,
    PasswordResetRequested,
    UserLoggedIn,
    UserRegistered,
)
from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    accounts_registered_total,
    emails_confirmed_total,
    license_admin_actions_total,
    licenses_activated_total,
    licenses_issued_total,
    password_resets_total,
)
from licenses.domain.events import (
    LicenseActivated,
    LicenseDeactivated,
    LicenseDeleted,
    LicenseHwidBound,
    LicenseIssued,
    LicenseReleased,
    LicenseUpdated,
)

logger = logging.getLogger(__name__)

ACCOUNT_EVENTS = (
    UserRegistered,
    EmailConfirmed,
    UserLoggedIn,
    PasswordResetRequested,
    PasswordResetCompleted,
    PasswordChanged,
)

LICENSE_EVENTS = (
    LicenseIssued,
    LicenseActivated,
    LicenseHwidBound,
    LicenseUpdated,
    LicenseDeactivated,
    LicenseReleased,
    LicenseDeleted,
)

_ADMIN_ACTIONS = {
    LicenseUpdated: "update",
    LicenseDeactivated: "deactivate",
    LicenseReleased: "release",
    LicenseDeleted: "delete",
}

_registered = False


class AuditLogEventHandler(EventHandler):
    """Writes every domain event to the audit logger as structured JSON."""

    audit_logger = logging.getLogger("core.audit")

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        self.audit_logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={"event": event.to_dict()},
        )


class MetricsEventHandler(EventHandler):
    """Counts business events in Prometheus."""

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, UserRegistered):
            accounts_registered_total.inc()
        elif isinstance(event, EmailConfirmed):
            emails_confirmed_total.inc()
        elif isinstance(event, PasswordResetCompleted):
            password_resets_total.inc()
        elif isinstance(event, LicenseIssued):
            licenses_issued_total.labels(duration_type=event.duration_type or "none").inc()
        elif isinstance(event, LicenseActivated):
            licenses_activated_total.inc()
        elif type(event) in _ADMIN_ACTIONS:
            license_admin_actions_total.labels(action=_ADMIN_ACTIONS[type(event)]).inc()


def register_event_handlers() -> None:
    """Register all event handlers with the event bus. Safe to call twice."""
    global _registered
    if _registered:
        return

    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in ACCOUNT_EVENTS + LICENSE_EVENTS:
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)

    _registered = True
    logger.info("Event handlers registered")
