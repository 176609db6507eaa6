"""Checkout: turns a shopping cart and the checkout form into an order."""

import structlog
from protean import handle
from protean.exceptions import InvalidOperationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from boutique.cart.cart import ShoppingCart
from boutique.domain import boutique
from boutique.order.order import Order, generate_order_number

logger = structlog.get_logger(__name__)

_ORDER_NUMBER_ATTEMPTS = 10


def _unused_order_number() -> str:
    """A freshly generated order number no stored order carries yet."""
    repo = current_domain.repository_for(Order)
    for _ in range(_ORDER_NUMBER_ATTEMPTS):
        order_number = generate_order_number()
        if not repo.order_number_taken(order_number):
            return order_number
        logger.warning("Order number already taken, drawing another", order_number=order_number)
    raise InvalidOperationError(
        {"order_number": [f"No free order number after {_ORDER_NUMBER_ATTEMPTS} attempts"]}
    )


@boutique.command(part_of="Order")
class PlaceOrder:
    cart_id = Identifier(required=True)
    user_id = String(max_length=255)  # None for guest checkout
    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    email = String(max_length=254)
    address = String(max_length=500)
    payment_method = String(required=True, max_length=30)
    notes = Text()


@boutique.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.get(command.cart_id)

        order_number = _unused_order_number()
        order = Order.create(
            customer_info={
                "name": command.name,
                "email": command.email or "",
                "phone": command.phone,
                "address": command.address or "",
            },
            lines=cart.lines,
            payment_method=command.payment_method,
            notes=command.notes,
            user_id=command.user_id,
            order_number=order_number,
        )
        cart.check_out(order)

        current_domain.repository_for(Order).add(order)
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total=order.total,
            line_count=len(order.lines),
        )
        return {"order_id": str(order.id), "order_number": order.order_number}
