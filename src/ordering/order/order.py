"""Order aggregate, a priced, owned order and its status lifecycle.

An Order is created once, in Pending status, from line items priced by
``ordering.order.pricing``. The line items are a price snapshot and the
derived totals are never recomputed afterwards.

Statuses:
    Pending → Confirmed → Processing → Shipped → Delivered
    Cancelled and Refunded are alternate end states.

No transition graph is enforced: an administrator may overwrite the status
with any value at any time. Only two rules are attached to transitions:
    - Shipped stamps ``shipped_date`` (once); Delivered stamps
      ``delivered_date`` and backfills a missing ``shipped_date`` to one day
      before delivery.
    - An owner may cancel unless the order is Shipped or Delivered.

Orders are never deleted; terminal states are reached through ``status``.
"""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.exceptions import ConflictError
from ordering.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from ordering.order.pricing import PricedOrder, to_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"

    @classmethod
    def parse(cls, value):
        """Resolve an enum member from a member, its value, or its name (any case)."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for status in cls:
            if text.lower() in (status.value.lower(), status.name.lower()):
                return status
        raise ValidationError({"status": [f"'{value}' is not a valid order status"]})


# States from which the owner can no longer cancel
_NON_CANCELLABLE_STATES = {OrderStatus.SHIPPED, OrderStatus.DELIVERED}


def generate_payment_reference(now: datetime) -> str:
    return f"PAY-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"


def _check_line_fields(items_data) -> None:
    errors = {}
    for index, data in enumerate(items_data):
        for name, label in (("product_id", "Product id"), ("product_name", "Product name")):
            value = data.get(name) if isinstance(data, Mapping) else None
            if value is None or not str(value).strip():
                errors[f"items[{index}].{name}"] = [f"{label} is required"]
    if errors:
        raise ValidationError(errors)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class LineItem:
    """One product within an order, with the price captured at placement time.

    ``position`` keeps the order in which the items were requested.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    sku = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True)
    line_total = Float(required=True)
    image_url = String(max_length=500)
    position = Integer(default=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_id = Identifier(required=True)
    customer_name = String(required=True, max_length=100)
    customer_email = String(required=True, max_length=200)
    shipping_address = String(required=True, max_length=500)
    billing_address = String(max_length=500)
    items = HasMany(LineItem)
    subtotal = Float(default=0.0)
    tax_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    total_amount = Float(default=0.0)
    currency = String(max_length=3, default="USD")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(max_length=50)
    payment_reference = String(max_length=100)
    tracking_number = String(max_length=50)
    notes = String(max_length=1000)
    shipped_date = DateTime()
    delivered_date = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def subtotal_must_equal_sum_of_line_totals(self):
        if not self.items:
            return
        line_sum = sum((to_money(item.line_total) for item in self.items), Decimal("0.00"))
        if to_money(self.subtotal) != line_sum:
            raise ValidationError({"subtotal": ["Subtotal must equal the sum of line totals"]})

    @invariant.post
    def total_must_equal_subtotal_plus_tax_and_shipping(self):
        expected = to_money(self.subtotal) + to_money(self.tax_amount) + to_money(self.shipping_cost)
        if to_money(self.total_amount) != expected:
            raise ValidationError({"total_amount": ["Total must equal subtotal plus tax and shipping"]})

    @invariant.post
    def shipped_date_cannot_follow_delivered_date(self):
        if self.shipped_date and self.delivered_date and self.shipped_date > self.delivered_date:
            raise ValidationError({"shipped_date": ["Shipped date cannot be later than delivered date"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        owner_id,
        customer_name,
        customer_email,
        shipping_address,
        items_data,
        pricing: PricedOrder,
        billing_address=None,
        payment_method=None,
        notes=None,
        currency="USD",
        now=None,
    ):
        """Create a Pending order from requested items and their computed pricing.

        Args:
            owner_id: Subject id of the identity placing the order.
            items_data: List of dicts with product_id, product_name, sku and
                        image_url, in request order.
            pricing: Result of ``compute_totals`` for the same items.

        Raises:
            ValidationError: A line has no product_id or product_name.
        """
        _check_line_fields(items_data)
        now = now or datetime.now(UTC)

        items = [
            LineItem(
                product_id=str(data["product_id"]),
                product_name=data["product_name"],
                sku=data.get("sku") or None,
                quantity=line.quantity,
                unit_price=float(line.unit_price),
                line_total=float(line.line_total),
                image_url=data.get("image_url") or None,
                position=position,
            )
            for position, (data, line) in enumerate(zip(items_data, pricing.lines, strict=True))
        ]

        order = cls(
            owner_id=str(owner_id),
            customer_name=customer_name,
            customer_email=customer_email,
            shipping_address=shipping_address,
            billing_address=billing_address or None,
            items=items,
            subtotal=float(pricing.subtotal),
            tax_amount=float(pricing.tax_amount),
            shipping_cost=float(pricing.shipping_cost),
            total_amount=float(pricing.total_amount),
            currency=currency,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method or None,
            payment_reference=generate_payment_reference(now),
            notes=notes or None,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_id=str(order.owner_id),
                item_count=len(items),
                subtotal=order.subtotal,
                tax_amount=order.tax_amount,
                shipping_cost=order.shipping_cost,
                total_amount=order.total_amount,
                currency=order.currency,
                payment_reference=order.payment_reference,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------
    @property
    def line_items(self):
        """Line items in the order they were requested."""
        return sorted(self.items or [], key=lambda item: item.position or 0)

    @property
    def item_count(self):
        return len(self.items or [])

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def set_status(self, new_status, tracking_number=None, notes=None, now=None):
        """Overwrite the status and stamp the dates that go with it.

        Empty ``tracking_number`` or ``notes`` leave the stored values alone.
        """
        target = OrderStatus.parse(new_status)
        now = now or datetime.now(UTC)
        previous_status = self.status

        with atomic_change(self):
            self.status = target.value

            if target == OrderStatus.SHIPPED and self.shipped_date is None:
                self.shipped_date = now
            elif target == OrderStatus.DELIVERED:
                self.delivered_date = now
                if self.shipped_date is None:
                    self.shipped_date = now - timedelta(days=1)

            if tracking_number:
                self.tracking_number = tracking_number
            if notes:
                self.notes = notes

            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target.value,
                tracking_number=self.tracking_number,
                shipped_date=self.shipped_date,
                delivered_date=self.delivered_date,
                changed_at=now,
            )
        )

    def cancel(self, now=None):
        """Cancel the order on behalf of its owner.

        Ownership is established by how the order was loaded, not here.
        """
        current = OrderStatus(self.status)
        if current in _NON_CANCELLABLE_STATES:
            raise ConflictError("Cannot cancel a shipped or delivered order")

        now = now or datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                owner_id=str(self.owner_id),
                previous_status=current.value,
                cancelled_at=now,
            )
        )
