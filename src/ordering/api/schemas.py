"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Requests never carry derived fields: owner,
totals, status and payment reference are assigned by the domain, and any
such keys in a request body are ignored.
"""

from datetime import datetime
from decimal import Decimal
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ordering.order.pricing import to_money

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None
    errors: list[str] = Field(default_factory=list)


def _money(value) -> float:
    return float(to_money(value or 0))


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
    product_name: str = Field(min_length=1, max_length=200)
    sku: str | None = Field(default=None, max_length=50)
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(gt=0)
    image_url: str | None = Field(default=None, max_length=500)


class CreateOrderRequest(BaseModel):
    customer_name: str = Field(min_length=1, max_length=100)
    customer_email: str = Field(min_length=3, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")
    shipping_address: str = Field(min_length=1, max_length=500)
    billing_address: str | None = Field(default=None, max_length=500)
    payment_method: str = Field(min_length=1, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)
    items: list[OrderItemRequest] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "John Doe",
                    "customer_email": "john.doe@example.com",
                    "shipping_address": "123 Main St, New York, NY 10001",
                    "payment_method": "Credit Card",
                    "items": [
                        {
                            "product_id": "1",
                            "product_name": "Laptop Pro 15",
                            "sku": "LAP-PRO-15",
                            "quantity": 1,
                            "unit_price": "1299.99",
                        }
                    ],
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str = Field(min_length=1)
    tracking_number: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class LineItemResponse(BaseModel):
    product_id: str
    product_name: str
    sku: str | None = None
    quantity: int
    unit_price: float
    line_total: float
    image_url: str | None = None

    @classmethod
    def from_item(cls, item) -> "LineItemResponse":
        return cls(
            product_id=str(item.product_id),
            product_name=item.product_name,
            sku=item.sku,
            quantity=item.quantity,
            unit_price=_money(item.unit_price),
            line_total=_money(item.line_total),
            image_url=item.image_url,
        )


class OrderSummaryResponse(BaseModel):
    id: str
    customer_name: str
    customer_email: str
    total_amount: float
    status: str
    created_at: datetime | None = None
    item_count: int

    @classmethod
    def from_order(cls, order) -> "OrderSummaryResponse":
        return cls(
            id=str(order.id),
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            total_amount=_money(order.total_amount),
            status=order.status,
            created_at=order.created_at,
            item_count=order.item_count,
        )


class OrderResponse(BaseModel):
    id: str
    owner_id: str
    customer_name: str
    customer_email: str
    shipping_address: str
    billing_address: str | None = None
    subtotal: float
    tax_amount: float
    shipping_cost: float
    total_amount: float
    currency: str
    status: str
    payment_method: str | None = None
    payment_reference: str | None = None
    tracking_number: str | None = None
    notes: str | None = None
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[LineItemResponse] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        return cls(
            id=str(order.id),
            owner_id=str(order.owner_id),
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            shipping_address=order.shipping_address,
            billing_address=order.billing_address,
            subtotal=_money(order.subtotal),
            tax_amount=_money(order.tax_amount),
            shipping_cost=_money(order.shipping_cost),
            total_amount=_money(order.total_amount),
            currency=order.currency,
            status=order.status,
            payment_method=order.payment_method,
            payment_reference=order.payment_reference,
            tracking_number=order.tracking_number,
            notes=order.notes,
            shipped_date=order.shipped_date,
            delivered_date=order.delivered_date,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[LineItemResponse.from_item(item) for item in order.line_items],
        )
