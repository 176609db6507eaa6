"""Order status changes: the single entry point for every status update.

Admin and manager dashboards and the customer's own order pages all send
``ChangeOrderStatus``; none of them write ``Order.status`` directly.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from boutique.domain import boutique
from boutique.order.order import Order

logger = structlog.get_logger(__name__)


@boutique.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=30)
    actor_role = String(required=True, max_length=20)
    actor_id = String(max_length=255)


@boutique.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        order.transition_to(
            command.new_status,
            actor_role=command.actor_role,
            actor_id=command.actor_id,
        )

        if order.status == previous_status:
            logger.debug(
                "Status change was a no-op",
                order_id=str(order.id),
                status=order.status,
            )
            return order.status

        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous_status,
            new_status=order.status,
            actor_role=command.actor_role,
        )
        return order.status
