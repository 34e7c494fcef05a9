"""Order pricing: derives line totals, tax, shipping and the grand total.

Pricing is a pure function of the requested line items and two deployment
constants (tax rate and flat shipping fee). Amounts are handled as
``Decimal`` throughout; only tax is rounded (half-up, to cents), so

    subtotal     = Σ quantity × unit_price
    total_amount = subtotal + tax_amount + shipping_cost

hold exactly. Totals are computed once, when the order is placed, and are a
snapshot: later catalogue price changes never reach an existing order.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PricedLine:
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class PricedOrder:
    lines: tuple[PricedLine, ...]
    subtotal: Decimal
    tax_amount: Decimal
    shipping_cost: Decimal
    total_amount: Decimal


def to_decimal(value) -> Decimal:
    """Convert a number (or its string form) to ``Decimal`` without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidOperation(f"Not a number: {value!r}")
    return Decimal(str(value))


def to_money(value) -> Decimal:
    """Read a stored amount back as a 2-digit ``Decimal``."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _read(item, name):
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _price_line(index: int, item) -> PricedLine:
    field = f"items[{index}]"

    try:
        quantity = to_decimal(_read(item, "quantity"))
    except (InvalidOperation, ValueError):
        raise ValidationError({f"{field}.quantity": ["Quantity must be a whole number"]}) from None
    if not quantity.is_finite() or quantity != quantity.to_integral_value():
        raise ValidationError({f"{field}.quantity": ["Quantity must be a whole number"]})
    if quantity < 1:
        raise ValidationError({f"{field}.quantity": ["Quantity must be greater than 0"]})

    try:
        unit_price = to_decimal(_read(item, "unit_price"))
    except (InvalidOperation, ValueError):
        raise ValidationError({f"{field}.unit_price": ["Unit price must be a number"]}) from None
    if not unit_price.is_finite() or unit_price <= 0:
        raise ValidationError({f"{field}.unit_price": ["Unit price must be greater than 0"]})
    if unit_price != unit_price.quantize(CENTS):
        raise ValidationError(
            {f"{field}.unit_price": ["Unit price must be in whole cents, currency amounts carry 2 decimal places"]}
        )

    return PricedLine(
        quantity=int(quantity),
        unit_price=unit_price,
        line_total=quantity * unit_price,
    )


def compute_totals(line_items: Sequence, tax_rate, shipping_fee) -> PricedOrder:
    """Price an order from its line items.

    Args:
        line_items: Mappings or objects exposing ``quantity`` and ``unit_price``.
        tax_rate: Fraction of the subtotal charged as tax (``0.08`` for 8%).
        shipping_fee: Flat shipping charge added to every order.

    Raises:
        ValidationError: When there are no line items, or a line has a
            non-positive quantity or unit price.
    """
    if not line_items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    lines = tuple(_price_line(index, item) for index, item in enumerate(line_items))

    subtotal = sum((line.line_total for line in lines), Decimal("0.00"))
    tax_amount = (subtotal * to_decimal(tax_rate)).quantize(CENTS, rounding=ROUND_HALF_UP)
    shipping_cost = to_money(shipping_fee)

    return PricedOrder(
        lines=lines,
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        total_amount=subtotal + tax_amount + shipping_cost,
    )
