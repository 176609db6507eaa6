"""Invoice eligibility: which orders may be presented as invoices.

An order is invoiceable once payment is settled and it has not been
cancelled or refunded. Works on anything exposing ``status``: the Order
aggregate as well as the OrderSummary read model.
"""

from collections.abc import Iterable

from boutique.order.lifecycle import OrderStatus

INVOICEABLE_STATUSES = frozenset(
    {
        OrderStatus.PAID,
        OrderStatus.SHIPPED,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    }
)

_INVOICEABLE_VALUES = frozenset(status.value for status in INVOICEABLE_STATUSES)


def is_invoiceable(order) -> bool:
    status = order.status.value if isinstance(order.status, OrderStatus) else order.status
    return status in _INVOICEABLE_VALUES


def filter_invoiceable(orders: Iterable) -> list:
    return [order for order in orders if is_invoiceable(order)]
