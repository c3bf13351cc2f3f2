from decimal import Decimal

import pytest

from jobtracker.shared.money import format_money, round2, to_decimal


class TestMoney:
    """Fixed-point helpers"""

    def test_round2_half_up(self):
        assert round2("10.555") == Decimal("10.56")
        assert round2("10.554") == Decimal("10.55")
        assert round2("0.005") == Decimal("0.01")

    def test_round2_always_two_places(self):
        assert str(round2(100)) == "100.00"
        assert str(round2("212.5")) == "212.50"

    def test_floats_are_converted_through_str(self):
        # Decimal(10.555) is 10.5549999... which would round down
        assert to_decimal(10.555) == Decimal("10.555")
        assert round2(10.555) == Decimal("10.56")

    def test_product_of_floats_rounds_consistently(self):
        assert round2(to_decimal(2.5) * to_decimal(85.00)) == Decimal("212.50")
        assert round2(to_decimal(3) * to_decimal(33.33)) == Decimal("99.99")
        assert round2(to_decimal(0.1) * to_decimal(0.5)) == Decimal("0.05")

    def test_rejects_non_numbers(self):
        with pytest.raises(ValueError):
            to_decimal("abc")
        with pytest.raises(TypeError):
            to_decimal(True)

    def test_unroundable_values_raise_value_error(self):
        # Quantizing 1e30 to cents needs more digits than the context precision
        with pytest.raises(ValueError):
            round2("1e30")
        with pytest.raises(ValueError):
            round2("Infinity")

    def test_format_money(self):
        assert format_money(Decimal("5")) == "5.00"
        assert format_money("12.345") == "12.35"
