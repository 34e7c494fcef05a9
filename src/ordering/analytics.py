"""Order analytics: revenue and order counts over a creation-date window.

The aggregator does not check who is asking; callers gate it (see
``ordering.access``). Reads are not coordinated with in-flight writes.
"""

from decimal import Decimal

import structlog

from ordering.order.order import OrderStatus
from ordering.order.pricing import to_money

logger = structlog.get_logger(__name__)

# Orders that count towards revenue
REVENUE_STATUSES = (OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value)


class OrderAggregator:
    """Summaries over orders whose ``created_at`` lies in ``[start, end]``.

    Both bounds are inclusive and independently optional.

    Args:
        orders: Source exposing ``in_window(start, end, statuses=None)``,
                normally the Order repository.
    """

    def __init__(self, orders):
        self.orders = orders

    def total_revenue(self, start=None, end=None) -> Decimal:
        orders = self.orders.in_window(start, end, statuses=REVENUE_STATUSES)
        revenue = sum(
            (to_money(order.total_amount) for order in orders if order.status in REVENUE_STATUSES),
            Decimal("0.00"),
        )
        logger.info("Total revenue calculated", start=start, end=end, revenue=str(revenue))
        return revenue

    def total_count(self, start=None, end=None) -> int:
        count = len(self.orders.in_window(start, end))
        logger.info("Total orders counted", start=start, end=end, count=count)
        return count
