"""Shared BDD fixtures and step definitions for the Ordering domain."""

from decimal import Decimal

import pytest
from ordering.access import Identity
from ordering.exceptions import ConflictError, ForbiddenError
from ordering.gateway import OrderGateway
from ordering.order.order import Order
from ordering.order.pricing import to_money
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from pytest_bdd import given, parsers, then, when

DEFAULT_ITEMS = [
    {"product_id": "1", "product_name": "Laptop Pro 15", "quantity": 1, "unit_price": "1299.99"},
    {"product_id": "3", "product_name": "USB-C Hub", "quantity": 1, "unit_price": "79.99"},
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    return OrderGateway()


@pytest.fixture()
def administrator():
    return Identity.from_claims("ops-admin", ["Admin"])


@pytest.fixture()
def identities():
    return {}


@pytest.fixture()
def placed():
    """Ids of orders placed in the scenario, oldest first."""
    return []


@pytest.fixture()
def outcome():
    """What the last When step produced: a result or a captured error."""
    return {"result": None, "error": None}


@pytest.fixture()
def place(gateway, placed):
    def _place(identity, items=DEFAULT_ITEMS):
        order = gateway.place_order(
            identity,
            customer_name=f"Customer {identity.subject_id}",
            customer_email=f"{identity.subject_id.lower()}@example.com",
            shipping_address="1 Test Street",
            payment_method="Credit Card",
            items=items,
        )
        placed.append(str(order.id))
        return order

    return _place


@pytest.fixture()
def capture(outcome):
    def _capture(action):
        try:
            outcome["result"] = action()
        except (ConflictError, ForbiddenError, ObjectNotFoundError) as exc:
            outcome["error"] = exc

    return _capture


@pytest.fixture()
def current_order(placed):
    """Reload the most recently placed order."""
    return lambda: current_domain.repository_for(Order).get(placed[-1])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{name}" is a signed-in user'))
def _(identities, name):
    identities[name] = Identity.from_claims(name, ["User"])


@given(parsers.cfparse('"{name}" is a signed-in administrator'))
def _(identities, name):
    identities[name] = Identity.from_claims(name, ["Admin"])


@given(parsers.cfparse('"{name}" has placed an order'))
def _(place, identities, name):
    place(identities[name])


@given(parsers.cfparse('an administrator has set the order status to "{status}"'))
@when(parsers.cfparse('an administrator sets the order status to "{status}"'))
def _(gateway, administrator, placed, status):
    gateway.update_status(administrator, placed[-1], status)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{name}" tries to cancel the order'))
def _(gateway, identities, placed, capture, name):
    capture(lambda: gateway.cancel_order(identities[name], placed[-1]))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(current_order, status):
    assert current_order().status == status


@then("the request fails with a conflict")
def _(outcome):
    assert isinstance(outcome["error"], ConflictError)


@then("the request fails as not found")
def _(outcome):
    assert isinstance(outcome["error"], ObjectNotFoundError)


@then("the request is forbidden")
def _(outcome):
    assert isinstance(outcome["error"], ForbiddenError)


@then(parsers.cfparse("the order total is {amount}"))
def _(current_order, amount):
    assert to_money(current_order().total_amount) == Decimal(amount)
