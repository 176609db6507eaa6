"""Order summary: listing view for staff dashboards, customer order history and tracking."""

import json

import structlog
from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from boutique.domain import boutique
from boutique.order.events import OrderCreated, OrderStatusChanged
from boutique.order.order import Order

logger = structlog.get_logger(__name__)


@boutique.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True)
    user_id = String(required=True)
    customer_name = String()
    item_count = Integer(default=0)
    total = Float()
    currency = String(default="XOF")
    status = String(required=True)
    payment_method = String()
    created_at = DateTime()
    updated_at = DateTime()


@boutique.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderCreated)
    def on_order_created(self, event):
        lines = json.loads(event.lines) if isinstance(event.lines, str) else []
        customer = json.loads(event.customer) if isinstance(event.customer, str) else {}
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                order_number=event.order_number,
                user_id=event.user_id,
                customer_name=customer.get("name"),
                item_count=sum(line.get("quantity", 0) for line in lines),
                total=event.total,
                currency=event.currency,
                status=event.status,
                payment_method=event.payment_method,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = event.new_status
        summary.updated_at = event.changed_at
        repo.add(summary)
        logger.debug("Order summary updated", order_id=str(event.order_id), status=event.new_status)


def list_order_summaries(user_id=None) -> list[OrderSummary]:
    """All summaries, newest first, optionally restricted to one user's orders."""
    query = current_domain.repository_for(OrderSummary)._dao.query
    if user_id is not None:
        query = query.filter(user_id=str(user_id))
    summaries = query.all().items
    return sorted(summaries, key=lambda s: s.created_at, reverse=True)
