"""Demo data for local development.

Seeding is an explicit step (``python src/manage.py seed-demo``) and goes
through the regular commands, so demo orders are priced and stamped exactly
like real ones.
"""

import json

import structlog
from protean.domain import Domain

from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.status import UpdateOrderStatus

logger = structlog.get_logger(__name__)

DEMO_ORDERS = [
    {
        "owner_id": "user123",
        "customer_name": "John Doe",
        "customer_email": "john.doe@example.com",
        "shipping_address": "123 Main St, City, State 12345",
        "billing_address": "123 Main St, City, State 12345",
        "payment_method": "Credit Card",
        "items": [
            {
                "product_id": "1",
                "product_name": "Laptop Pro 15",
                "sku": "LP15-001",
                "quantity": 1,
                "unit_price": "1299.99",
            },
            {
                "product_id": "3",
                "product_name": "USB-C Hub",
                "sku": "USBC-003",
                "quantity": 1,
                "unit_price": "79.99",
            },
            {
                "product_id": "2",
                "product_name": "Wireless Mouse",
                "sku": "WM-002",
                "quantity": 1,
                "unit_price": "49.99",
            },
        ],
        "status": OrderStatus.DELIVERED,
        "tracking_number": "TRK123456789",
    },
    {
        "owner_id": "user456",
        "customer_name": "Jane Smith",
        "customer_email": "jane.smith@example.com",
        "shipping_address": "456 Oak Ave, Town, State 67890",
        "billing_address": "456 Oak Ave, Town, State 67890",
        "payment_method": "PayPal",
        "notes": "Express shipping requested",
        "items": [
            {
                "product_id": "2",
                "product_name": "Wireless Mouse",
                "sku": "WM-002",
                "quantity": 2,
                "unit_price": "49.99",
            },
        ],
        "status": OrderStatus.PROCESSING,
    },
]


def seed_demo(domain: Domain) -> list[str]:
    """Place the demo orders unless the store already holds orders.

    Returns the ids of the orders created.
    """
    created = []
    with domain.domain_context():
        if domain.repository_for(Order).list_visible():
            logger.info("Demo seed skipped, orders already present")
            return created

        for demo in DEMO_ORDERS:
            order_id = domain.process(
                PlaceOrder(
                    owner_id=demo["owner_id"],
                    customer_name=demo["customer_name"],
                    customer_email=demo["customer_email"],
                    shipping_address=demo["shipping_address"],
                    billing_address=demo.get("billing_address"),
                    payment_method=demo.get("payment_method"),
                    notes=demo.get("notes"),
                    items=json.dumps(demo["items"]),
                ),
                asynchronous=False,
            )
            domain.process(
                UpdateOrderStatus(
                    order_id=order_id,
                    status=demo["status"].value,
                    tracking_number=demo.get("tracking_number"),
                ),
                asynchronous=False,
            )
            created.append(order_id)

    logger.info("Demo orders seeded", count=len(created))
    return created
