"""Tests for order pricing."""

from decimal import Decimal

import pytest
from ordering.order.pricing import PricedOrder, compute_totals, to_money
from protean.exceptions import ValidationError

TAX_RATE = Decimal("0.08")
SHIPPING_FEE = Decimal("9.99")


def _price(items):
    return compute_totals(items, TAX_RATE, SHIPPING_FEE)


class TestComputeTotals:
    def test_reference_order(self):
        priced = _price(
            [
                {"quantity": 1, "unit_price": "1299.99"},
                {"quantity": 1, "unit_price": "79.99"},
            ]
        )
        assert isinstance(priced, PricedOrder)
        assert priced.subtotal == Decimal("1379.98")
        assert priced.tax_amount == Decimal("110.40")
        assert priced.shipping_cost == Decimal("9.99")
        assert priced.total_amount == Decimal("1500.37")

    def test_line_total_is_quantity_times_unit_price(self):
        priced = _price([{"quantity": 3, "unit_price": "19.99"}])
        assert priced.lines[0].line_total == Decimal("59.97")
        assert priced.lines[0].quantity == 3

    def test_lines_keep_input_order(self):
        priced = _price(
            [
                {"quantity": 2, "unit_price": "5.00"},
                {"quantity": 1, "unit_price": "100.00"},
            ]
        )
        assert [line.unit_price for line in priced.lines] == [Decimal("5.00"), Decimal("100.00")]

    def test_subtotal_is_sum_of_line_totals(self):
        priced = _price(
            [
                {"quantity": 2, "unit_price": "49.99"},
                {"quantity": 1, "unit_price": "0.01"},
            ]
        )
        assert priced.subtotal == sum(line.line_total for line in priced.lines)

    def test_total_is_subtotal_plus_tax_plus_shipping(self):
        priced = _price([{"quantity": 7, "unit_price": "13.37"}])
        assert priced.total_amount == priced.subtotal + priced.tax_amount + priced.shipping_cost

    def test_tax_rounds_half_up(self):
        # 0.50 * 0.01 = 0.005
        priced = compute_totals([{"quantity": 1, "unit_price": "0.50"}], Decimal("0.01"), Decimal("0"))
        assert priced.tax_amount == Decimal("0.01")

    def test_float_inputs_do_not_leak_binary_artifacts(self):
        priced = _price([{"quantity": 3, "unit_price": 0.1}])
        assert priced.subtotal == Decimal("0.3")

    def test_accepts_objects_with_attributes(self):
        class Line:
            quantity = 2
            unit_price = Decimal("10.00")

        priced = _price([Line()])
        assert priced.subtotal == Decimal("20.00")

    def test_is_deterministic(self):
        items = [{"quantity": 4, "unit_price": "2.49"}]
        assert _price(items) == _price(items)

    def test_uses_given_shipping_fee(self):
        priced = compute_totals([{"quantity": 1, "unit_price": "10.00"}], Decimal("0"), Decimal("4.5"))
        assert priced.shipping_cost == Decimal("4.50")
        assert priced.total_amount == Decimal("14.50")


class TestComputeTotalsValidation:
    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([])
        assert "items" in exc.value.messages

    def test_zero_quantity_rejected_with_line_index(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": 1, "unit_price": "1.00"}, {"quantity": 0, "unit_price": "1.00"}])
        assert "items[1].quantity" in exc.value.messages

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": -2, "unit_price": "1.00"}])
        assert "items[0].quantity" in exc.value.messages

    def test_fractional_quantity_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": "1.5", "unit_price": "1.00"}])
        assert "items[0].quantity" in exc.value.messages

    def test_missing_quantity_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"unit_price": "1.00"}])
        assert "items[0].quantity" in exc.value.messages

    def test_zero_unit_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": 1, "unit_price": "0"}])
        assert "items[0].unit_price" in exc.value.messages

    def test_negative_unit_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": 1, "unit_price": "-5.00"}])
        assert "items[0].unit_price" in exc.value.messages

    def test_unit_price_with_sub_cent_precision_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": 1, "unit_price": "1.999"}])
        assert "items[0].unit_price" in exc.value.messages
        assert "whole cents" in exc.value.messages["items[0].unit_price"][0]

    def test_non_numeric_unit_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _price([{"quantity": 1, "unit_price": "cheap"}])
        assert "items[0].unit_price" in exc.value.messages


class TestToMoney:
    def test_reads_float_as_two_digit_decimal(self):
        assert to_money(1500.37) == Decimal("1500.37")

    def test_pads_to_cents(self):
        assert to_money(5) == Decimal("5.00")
