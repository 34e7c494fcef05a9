"""Order gateway, the boundary between transport and the Ordering domain.

Every public method takes the caller's ``Identity`` first and authorizes it
before doing anything else. Mutations are dispatched as commands and run in a
Unit of Work; reads go straight to the repository with the caller's
visibility filter applied in the query.
"""

import json

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.access import Identity, Operation, enforce, visibility_filter
from ordering.analytics import OrderAggregator
from ordering.exceptions import ConflictError
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.status import UpdateOrderStatus

logger = structlog.get_logger(__name__)


class OrderGateway:
    """Authorize, then dispatch or query.

    Args:
        domain: Domain to run against. Defaults to the active domain context.
    """

    def __init__(self, domain=None):
        self.domain = domain

    @property
    def _domain(self):
        return self.domain or current_domain

    @property
    def orders(self):
        return self._domain.repository_for(Order)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def list_orders(self, identity: Identity) -> list[Order]:
        """Every order for an administrator, otherwise the caller's own."""
        enforce(identity, Operation.LIST_ORDERS)
        return self.orders.list_visible(owner_id=visibility_filter(identity, Operation.LIST_ORDERS))

    def get_order(self, identity: Identity, order_id: str) -> Order:
        enforce(identity, Operation.GET_ORDER)
        try:
            return self.orders.get_visible(order_id, owner_id=visibility_filter(identity))
        except ObjectNotFoundError:
            logger.warning("Order not visible", order_id=order_id, subject_id=identity.subject_id)
            raise

    def my_orders(self, identity: Identity) -> list[Order]:
        enforce(identity, Operation.LIST_MY_ORDERS)
        return self.orders.list_visible(owner_id=identity.subject_id)

    def orders_by_status(self, identity: Identity, status) -> list[Order]:
        enforce(identity, Operation.LIST_BY_STATUS)
        return self.orders.list_by_status(OrderStatus.parse(status).value)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def place_order(
        self,
        identity: Identity,
        customer_name,
        customer_email,
        shipping_address,
        items,
        payment_method,
        billing_address=None,
        notes=None,
    ) -> Order:
        """Place an order owned by the caller.

        ``items`` is a list of mappings with product_id, product_name, sku,
        quantity, unit_price and image_url. Totals are always derived here.
        """
        enforce(identity, Operation.CREATE_ORDER)
        order_id = self._process(
            PlaceOrder(
                owner_id=identity.subject_id,
                customer_name=customer_name,
                customer_email=customer_email,
                shipping_address=shipping_address,
                billing_address=billing_address,
                payment_method=payment_method,
                notes=notes,
                items=json.dumps(list(items), default=str),
            )
        )
        return self.orders.get(order_id)

    def update_status(self, identity: Identity, order_id: str, status, tracking_number=None, notes=None) -> Order:
        enforce(identity, Operation.UPDATE_STATUS)
        self._process(
            UpdateOrderStatus(
                order_id=order_id,
                status=OrderStatus.parse(status).value,
                tracking_number=tracking_number or None,
                notes=notes or None,
            )
        )
        return self.orders.get(order_id)

    def cancel_order(self, identity: Identity, order_id: str) -> Order:
        """Cancel one of the caller's own orders."""
        enforce(identity, Operation.CANCEL_ORDER)
        self._process(
            CancelOrder(
                order_id=order_id,
                owner_id=visibility_filter(identity, Operation.CANCEL_ORDER),
            )
        )
        return self.orders.get(order_id)

    # -------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------
    def total_revenue(self, identity: Identity, start=None, end=None):
        enforce(identity, Operation.VIEW_REVENUE)
        return OrderAggregator(self.orders).total_revenue(start, end)

    def total_count(self, identity: Identity, start=None, end=None) -> int:
        enforce(identity, Operation.VIEW_COUNT)
        return OrderAggregator(self.orders).total_count(start, end)

    def _process(self, command):
        try:
            return self._domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning("Concurrent order update rejected", command=command.__class__.__name__, error=str(exc))
            raise ConflictError("The order was modified concurrently, retry the request") from exc
