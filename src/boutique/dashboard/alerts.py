"""Dashboard alerts: badges and toasts fed by order events.

Staff dashboards get an alert for every new order; customers get one when
the status of one of their orders changes. Alerts are best effort: they are
written when the event is handled and are never replayed.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from boutique.domain import boutique
from boutique.order.events import OrderCreated, OrderStatusChanged
from boutique.order.lifecycle import GUEST_USER_ID
from boutique.order.order import Order

logger = structlog.get_logger(__name__)


class AlertAudience(Enum):
    STAFF = "staff"
    CUSTOMER = "customer"


class AlertKind(Enum):
    ORDER_CREATED = "order-created"
    ORDER_STATUS_CHANGED = "order-status-changed"


@boutique.projection
class DashboardAlert:
    alert_id = Identifier(identifier=True, required=True)
    audience = String(required=True, choices=AlertAudience)
    recipient_id = String()  # customer alerts only
    kind = String(required=True, choices=AlertKind)
    order_id = Identifier(required=True)
    order_number = String(required=True)
    status = String(required=True)
    message = String(max_length=500)
    is_read = Boolean(default=False)
    read_at = DateTime()
    created_at = DateTime()


@boutique.event_handler(part_of=Order)
class DashboardAlertsHandler:
    """Turns order events into dashboard alerts."""

    @handle(OrderCreated)
    def on_order_created(self, event: OrderCreated) -> None:
        current_domain.repository_for(DashboardAlert).add(
            DashboardAlert(
                alert_id=str(uuid4()),
                audience=AlertAudience.STAFF.value,
                kind=AlertKind.ORDER_CREATED.value,
                order_id=event.order_id,
                order_number=event.order_number,
                status=event.status,
                message=f"New order {event.order_number}: {event.total:g} {event.currency}",
                created_at=event.created_at,
            )
        )
        logger.info("New order alert raised", order_number=event.order_number)

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        if event.user_id == GUEST_USER_ID:
            logger.info(
                "Guest order status changed, no customer to alert",
                order_number=event.order_number,
                status=event.new_status,
            )
            return

        current_domain.repository_for(DashboardAlert).add(
            DashboardAlert(
                alert_id=str(uuid4()),
                audience=AlertAudience.CUSTOMER.value,
                recipient_id=event.user_id,
                kind=AlertKind.ORDER_STATUS_CHANGED.value,
                order_id=event.order_id,
                order_number=event.order_number,
                status=event.new_status,
                message=f"Order {event.order_number} is now {event.new_status}",
                created_at=event.changed_at,
            )
        )


def unread_alerts(audience, recipient_id=None) -> list[DashboardAlert]:
    audience = audience.value if isinstance(audience, AlertAudience) else audience
    query = current_domain.repository_for(DashboardAlert)._dao.query.filter(audience=audience, is_read=False)
    if recipient_id is not None:
        query = query.filter(recipient_id=str(recipient_id))
    return sorted(query.all().items, key=lambda a: a.created_at, reverse=True)


def is_addressed_to(alert, audience, recipient_id=None) -> bool:
    audience = audience.value if isinstance(audience, AlertAudience) else audience
    if alert.audience != audience:
        return False
    return audience == AlertAudience.STAFF.value or (bool(recipient_id) and alert.recipient_id == str(recipient_id))


def mark_alert_read(alert_id, audience, recipient_id=None) -> DashboardAlert:
    """Mark an alert read on behalf of its audience.

    Alerts addressed to someone else are reported as not found.
    """
    repo = current_domain.repository_for(DashboardAlert)
    alert = repo.get(alert_id)
    if not is_addressed_to(alert, audience, recipient_id):
        raise ObjectNotFoundError({"alert_id": [f"No alert {alert_id!r} for this reader"]})
    if not alert.is_read:
        alert.is_read = True
        alert.read_at = datetime.now(UTC)
        repo.add(alert)
    return alert
