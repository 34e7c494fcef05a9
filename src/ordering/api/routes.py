"""FastAPI routes for the Ordering domain."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from ordering.access import Identity
from ordering.api.identity import current_identity
from ordering.api.schemas import (
    ApiResponse,
    CreateOrderRequest,
    OrderResponse,
    OrderSummaryResponse,
    UpdateStatusRequest,
)
from ordering.gateway import OrderGateway

gateway = OrderGateway()


def _summaries(orders) -> list[OrderSummaryResponse]:
    return [OrderSummaryResponse.from_order(order) for order in orders]


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=ApiResponse[list[OrderSummaryResponse]])
async def list_orders(identity: Identity = Depends(current_identity)):
    orders = gateway.list_orders(identity)
    return ApiResponse(data=_summaries(orders), message="Orders retrieved successfully")


@order_router.get("/my-orders", response_model=ApiResponse[list[OrderSummaryResponse]])
async def my_orders(identity: Identity = Depends(current_identity)):
    orders = gateway.my_orders(identity)
    return ApiResponse(data=_summaries(orders), message="Your orders retrieved successfully")


@order_router.get("/status/{status}", response_model=ApiResponse[list[OrderSummaryResponse]])
async def orders_by_status(status: str, identity: Identity = Depends(current_identity)):
    orders = gateway.orders_by_status(identity, status)
    return ApiResponse(data=_summaries(orders), message=f"Orders with status '{status}' retrieved successfully")


@order_router.get("/analytics/revenue", response_model=ApiResponse[float])
async def total_revenue(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    identity: Identity = Depends(current_identity),
):
    revenue = gateway.total_revenue(identity, start_date, end_date)
    return ApiResponse(data=float(revenue), message="Total revenue calculated successfully")


@order_router.get("/analytics/count", response_model=ApiResponse[int])
async def total_count(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    identity: Identity = Depends(current_identity),
):
    count = gateway.total_count(identity, start_date, end_date)
    return ApiResponse(data=count, message="Total orders count retrieved successfully")


@order_router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(order_id: str, identity: Identity = Depends(current_identity)):
    order = gateway.get_order(identity, order_id)
    return ApiResponse(data=OrderResponse.from_order(order), message="Order retrieved successfully")


@order_router.post("", status_code=201, response_model=ApiResponse[OrderResponse])
async def create_order(body: CreateOrderRequest, identity: Identity = Depends(current_identity)):
    order = gateway.place_order(
        identity,
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        shipping_address=body.shipping_address,
        billing_address=body.billing_address,
        payment_method=body.payment_method,
        notes=body.notes,
        items=[item.model_dump() for item in body.items],
    )
    return ApiResponse(data=OrderResponse.from_order(order), message="Order created successfully")


@order_router.put("/{order_id}/status", response_model=ApiResponse[OrderResponse])
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    identity: Identity = Depends(current_identity),
):
    order = gateway.update_status(
        identity,
        order_id,
        body.status,
        tracking_number=body.tracking_number,
        notes=body.notes,
    )
    return ApiResponse(data=OrderResponse.from_order(order), message="Order status updated successfully")


@order_router.put("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
async def cancel_order(order_id: str, identity: Identity = Depends(current_identity)):
    order = gateway.cancel_order(identity, order_id)
    return ApiResponse(data=OrderResponse.from_order(order), message="Order cancelled successfully")
