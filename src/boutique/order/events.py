"""Domain events for the Order aggregate.

These two events are the notification bus of the storefront: dashboards,
badges and read models subscribe to them through event handlers and
projectors registered on the Order aggregate.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from boutique.domain import boutique


@boutique.event(part_of="Order")
class OrderCreated:
    """A customer checked out and a new order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = String(required=True)
    customer = Text(required=True)  # JSON: {name, email, phone, address}
    lines = Text(required=True)  # JSON: list of line dicts
    total = Float(required=True)
    currency = String(required=True)
    status = String(required=True)
    payment_method = String(required=True)
    notes = Text()
    created_at = DateTime(required=True)


@boutique.event(part_of="Order")
class OrderStatusChanged:
    """An actor moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    actor_role = String(required=True)
    actor_id = String()
    changed_at = DateTime(required=True)
