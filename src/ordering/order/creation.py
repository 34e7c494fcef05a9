"""Order placement: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.pricing import compute_totals

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    """Price the requested items and open a Pending order owned by the caller."""

    owner_id = Identifier(required=True)
    customer_name = String(required=True, max_length=100)
    customer_email = String(required=True, max_length=200)
    shipping_address = String(required=True, max_length=500)
    billing_address = String(max_length=500)
    payment_method = String(required=True, max_length=50)
    notes = String(max_length=1000)
    items = Text(required=True)  # JSON: list of {product_id, product_name, sku, quantity, unit_price, image_url}


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        settings = get_settings()

        pricing = compute_totals(items_data, settings.tax_rate, settings.shipping_fee)

        order = Order.place(
            owner_id=command.owner_id,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            shipping_address=command.shipping_address,
            billing_address=command.billing_address,
            payment_method=command.payment_method,
            notes=command.notes,
            items_data=items_data,
            pricing=pricing,
            currency=settings.currency,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            owner_id=str(order.owner_id),
            total_amount=order.total_amount,
        )
        return str(order.id)
