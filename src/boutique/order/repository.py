"""Repository for the Order aggregate."""

from protean.exceptions import InvalidOperationError, ObjectNotFoundError

from boutique.domain import boutique
from boutique.order.order import Order


def _normalize(order_number) -> str:
    return (order_number or "").strip().upper()


@boutique.repository(part_of=Order)
class OrderRepository:
    """Order persistence port with lookups used by tracking and dashboards."""

    def _matching(self, order_number):
        return self._dao.query.filter(order_number=_normalize(order_number)).all().items

    def order_number_taken(self, order_number: str) -> bool:
        return bool(self._matching(order_number))

    def get_by_order_number(self, order_number: str) -> Order:
        """Find an order by its human-readable number, ignoring case.

        Raises:
            ObjectNotFoundError: no order carries the number.
            InvalidOperationError: more than one order carries it; the number
                cannot identify an order and is never resolved to either.
        """
        results = self._matching(order_number)
        if not results:
            raise ObjectNotFoundError({"order_number": [f"No order numbered {order_number!r}"]})
        if len(results) > 1:
            raise InvalidOperationError({"order_number": [f"Order number {order_number!r} is ambiguous"]})
        return self.get(results[0].id)
