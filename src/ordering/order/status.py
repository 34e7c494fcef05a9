"""Order status updates: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    """Overwrite an order's status, optionally recording tracking and notes."""

    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    tracking_number = String(max_length=50)
    notes = String(max_length=1000)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        order.set_status(
            command.status,
            tracking_number=command.tracking_number,
            notes=command.notes,
        )
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
