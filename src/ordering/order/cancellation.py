"""Order cancellation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    """Cancel an order on behalf of the identity that placed it."""

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        # Filtered by owner: someone else's order is reported as missing
        order = repo.get_visible(command.order_id, owner_id=command.owner_id)

        order.cancel()
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), owner_id=str(order.owner_id))
