"""Domain events for the Order aggregate.

Events are immutable facts raised alongside each state change and published
when the surrounding unit of work commits.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A priced order was created in Pending status."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax_amount = Float(required=True)
    shipping_cost = Float(required=True)
    total_amount = Float(required=True)
    currency = String(default="USD")
    payment_reference = String(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """An administrator set the order's status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    tracking_number = String()
    shipped_date = DateTime()
    delivered_date = DateTime()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The owner cancelled an order that had not yet shipped."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)
