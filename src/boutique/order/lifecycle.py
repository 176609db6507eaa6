"""Order status state machine: statuses, actor roles and the authorization table.

Every status change of an order is checked here, whichever surface requested
it. The table maps each actor role to the statuses it may set::

    customer  Cancelled, only while the order is PendingPayment, own orders only
    manager   Processing, Shipped, OutForDelivery, Delivered, Cancelled
    admin     any status, from any non-terminal status

Delivered, Cancelled and Refunded are terminal. Only an admin may act on a
terminal order, and only to settle a refund (Cancelled or Delivered to
Refunded).
"""

from enum import Enum

from protean.exceptions import ValidationError

from boutique.errors import SelfActionError, UnauthorizedTransitionError


class OrderStatus(Enum):
    PENDING_PAYMENT = "PendingPayment"
    PAID = "Paid"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    OUT_FOR_DELIVERY = "OutForDelivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class ActorRole(Enum):
    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"


GUEST_USER_ID = "guest"

TERMINAL_STATUSES = frozenset(
    {
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
        OrderStatus.REFUNDED,
    }
)

_MANAGER_SETTABLE = frozenset(
    {
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    }
)

# Terminal states an admin may still settle into Refunded
_REFUNDABLE_TERMINALS = frozenset({OrderStatus.CANCELLED, OrderStatus.DELIVERED})


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status {value!r}"]}) from None


def parse_role(value) -> ActorRole:
    if isinstance(value, ActorRole):
        return value
    try:
        return ActorRole(value)
    except ValueError:
        raise ValidationError({"actor_role": [f"Unknown actor role {value!r}"]}) from None


def is_terminal(status) -> bool:
    return parse_status(status) in TERMINAL_STATUSES


def _is_owner(actor_id, owner_id) -> bool:
    # Guest orders have no owner a customer could authenticate as
    return bool(actor_id) and str(owner_id) != GUEST_USER_ID and str(actor_id) == str(owner_id)


def is_permitted(role: ActorRole, current: OrderStatus, target: OrderStatus) -> bool:
    """Whether the authorization table lets ``role`` move an order from ``current`` to ``target``."""
    if role == ActorRole.ADMIN:
        if current in TERMINAL_STATUSES:
            return current in _REFUNDABLE_TERMINALS and target == OrderStatus.REFUNDED
        return True

    if current in TERMINAL_STATUSES:
        return False

    if role == ActorRole.MANAGER:
        return target in _MANAGER_SETTABLE

    return current == OrderStatus.PENDING_PAYMENT and target == OrderStatus.CANCELLED


def check_transition(current, target, actor_role, actor_id, owner_id) -> bool:
    """Validate a requested status change.

    Returns False when ``target`` is already the current status (the change is
    a no-op), True when the change may be applied.

    Raises:
        ValidationError: unknown status or role.
        SelfActionError: a customer acting on an order they do not own, or a
            non-admin acting on a terminal order.
        UnauthorizedTransitionError: the table does not allow the change.
    """
    current = parse_status(current)
    target = parse_status(target)
    role = parse_role(actor_role)

    if role == ActorRole.CUSTOMER and not _is_owner(actor_id, owner_id):
        raise SelfActionError({"actor_id": ["Customers can only act on their own orders"]})

    if current == target:
        return False

    if current in TERMINAL_STATUSES and role != ActorRole.ADMIN:
        raise SelfActionError({"status": [f"Order is {current.value} and can no longer be changed"]})

    if not is_permitted(role, current, target):
        raise UnauthorizedTransitionError(
            {"status": [f"A {role.value} cannot move an order from {current.value} to {target.value}"]}
        )

    return True


def allowed_transitions(current, actor_role, actor_id, owner_id) -> list[OrderStatus]:
    """Statuses the actor may set on an order currently in ``current``, in lifecycle order."""
    current = parse_status(current)
    role = parse_role(actor_role)

    if role == ActorRole.CUSTOMER and not _is_owner(actor_id, owner_id):
        return []

    return [status for status in OrderStatus if status != current and is_permitted(role, current, status)]
