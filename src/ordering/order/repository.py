"""Repository for the Order aggregate.

Reads that depend on who is asking take an ``owner_id`` filter and apply it in
the query itself. A record that exists but belongs to someone else is never
loaded, so "not yours" and "does not exist" fail the same way.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.order import Order

_PAGE_SIZE = 100


def as_utc(moment: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=UTC)


@ordering.repository(part_of=Order)
class OrderRepository:
    def _scan(self, **filters):
        """Yield every matching order, newest first, page by page."""
        offset = 0
        while True:
            page = self._dao.query.filter(**filters).order_by("-created_at").offset(offset).limit(_PAGE_SIZE).all()
            yield from page.items
            if len(page.items) < _PAGE_SIZE:
                return
            offset += _PAGE_SIZE

    def get_visible(self, order_id, owner_id=None) -> Order:
        """Load one order, restricted to ``owner_id`` when given.

        Raises ObjectNotFoundError when no order matches the id (and owner).
        """
        filters = {"id": order_id}
        if owner_id is not None:
            filters["owner_id"] = owner_id

        results = self._dao.query.filter(**filters).limit(1).all()
        if not results.items:
            raise ObjectNotFoundError(f"Order `{order_id}` does not exist")
        return results.items[0]

    def list_visible(self, owner_id=None) -> list[Order]:
        """All orders, or only those owned by ``owner_id`` when given."""
        if owner_id is None:
            return list(self._scan())
        return list(self._scan(owner_id=owner_id))

    def list_by_status(self, status: str) -> list[Order]:
        return list(self._scan(status=status))

    def in_window(self, start=None, end=None, statuses=None) -> list[Order]:
        """Orders created within ``[start, end]`` (each bound optional, inclusive)."""
        filters = {}
        if statuses:
            filters["status__in"] = list(statuses)

        start, end = as_utc(start), as_utc(end)
        orders = []
        for order in self._scan(**filters):
            created_at = as_utc(order.created_at)
            if start is not None and created_at < start:
                continue
            if end is not None and created_at > end:
                continue
            orders.append(order)
        return orders
