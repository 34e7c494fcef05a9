"""Application tests for the order commands."""

import json
from decimal import Decimal

import pytest
from ordering.exceptions import ConflictError
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.pricing import to_money
from ordering.order.status import UpdateOrderStatus
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _place_order(owner_id="user-1", items=None):
    items = items or [
        {"product_id": "1", "product_name": "Laptop Pro 15", "sku": "LP15-001", "quantity": 1, "unit_price": "1299.99"},
        {"product_id": "3", "product_name": "USB-C Hub", "sku": "USBC-003", "quantity": 1, "unit_price": "79.99"},
    ]
    return current_domain.process(
        PlaceOrder(
            owner_id=owner_id,
            customer_name="John Doe",
            customer_email="john.doe@example.com",
            shipping_address="123 Main St",
            payment_method="Credit Card",
            items=json.dumps(items),
        ),
        asynchronous=False,
    )


class TestPlaceOrderCommand:
    def test_returns_id_of_persisted_order(self):
        order_id = _place_order()
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert order.owner_id == "user-1"

    def test_prices_with_configured_constants(self):
        order = current_domain.repository_for(Order).get(_place_order())
        assert to_money(order.subtotal) == Decimal("1379.98")
        assert to_money(order.tax_amount) == Decimal("110.40")
        assert to_money(order.shipping_cost) == Decimal("9.99")
        assert to_money(order.total_amount) == Decimal("1500.37")

    def test_line_items_persisted_in_order(self):
        order = current_domain.repository_for(Order).get(_place_order())
        assert [item.sku for item in order.line_items] == ["LP15-001", "USBC-003"]

    def test_invalid_line_rejected_and_nothing_stored(self):
        with pytest.raises(ValidationError) as exc:
            _place_order(items=[{"product_id": "1", "product_name": "Thing", "quantity": 0, "unit_price": "1.00"}])
        assert "items[0].quantity" in exc.value.messages
        assert current_domain.repository_for(Order).list_visible() == []

    def test_line_without_product_id_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place_order(items=[{"product_name": "Thing", "quantity": 1, "unit_price": "1.00"}])
        assert exc.value.messages["items[0].product_id"] == ["Product id is required"]
        assert current_domain.repository_for(Order).list_visible() == []


class TestUpdateOrderStatusCommand:
    def test_status_persisted(self):
        order_id = _place_order()
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, status="Shipped", tracking_number="TRK-9"),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "Shipped"
        assert order.tracking_number == "TRK-9"
        assert order.shipped_date is not None

    def test_delivered_backfills_shipped_date(self):
        order_id = _place_order()
        current_domain.process(UpdateOrderStatus(order_id=order_id, status="Delivered"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert (order.delivered_date - order.shipped_date).days == 1

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateOrderStatus(order_id="missing", status="Shipped"), asynchronous=False)

    def test_unknown_status_rejected_by_command(self):
        with pytest.raises(ValidationError):
            UpdateOrderStatus(order_id="any", status="Lost")


class TestCancelOrderCommand:
    def test_owner_cancels(self):
        order_id = _place_order(owner_id="U1")
        current_domain.process(CancelOrder(order_id=order_id, owner_id="U1"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value

    def test_other_owner_sees_not_found(self):
        order_id = _place_order(owner_id="U1")
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(CancelOrder(order_id=order_id, owner_id="U2"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value

    def test_shipped_order_conflicts(self):
        order_id = _place_order(owner_id="U1")
        current_domain.process(UpdateOrderStatus(order_id=order_id, status="Shipped"), asynchronous=False)
        with pytest.raises(ConflictError):
            current_domain.process(CancelOrder(order_id=order_id, owner_id="U1"), asynchronous=False)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "Shipped"
