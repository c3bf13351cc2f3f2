from decimal import Decimal

import pytest

from jobtracker.domain.billing import ledger
from jobtracker.domain.billing.schemas import LineItemCreate
from jobtracker.shared.errors import ConflictError, ValidationError


class TestPriceLineItems:
    """Server-side line item amounts"""

    def test_amount_is_rounded_product(self):
        (item,) = ledger.price_line_items([{"description": "Labor", "quantity": 2.5, "rate": 85}])
        assert item.amount == Decimal("212.50")
        assert item.to_json() == {"description": "Labor", "quantity": 2.5, "rate": 85.0, "amount": 212.5}

    def test_accepts_schema_objects(self):
        (item,) = ledger.price_line_items(
            [LineItemCreate(description="  Parts ", quantity=Decimal("3"), rate=Decimal("25.50"))]
        )
        assert item.description == "Parts"
        assert item.amount == Decimal("76.50")

    def test_rounding_half_up_per_item(self):
        (item,) = ledger.price_line_items([{"description": "Filter", "quantity": "0.5", "rate": "0.05"}])
        assert item.amount == Decimal("0.03")

    def test_empty_list_rejected(self):
        with pytest.raises(ValidationError, match="non-empty"):
            ledger.price_line_items([])
        with pytest.raises(ValidationError, match="non-empty"):
            ledger.price_line_items(None)

    @pytest.mark.parametrize("item", [
        {"quantity": 1, "rate": 10},
        {"description": "   ", "quantity": 1, "rate": 10},
        {"description": "Labor", "rate": 10},
        {"description": "Labor", "quantity": 1},
    ])
    def test_missing_fields_rejected(self, item):
        with pytest.raises(ValidationError, match="description, quantity, and rate"):
            ledger.price_line_items([item])

    @pytest.mark.parametrize("item", [
        {"description": "Labor", "quantity": 0, "rate": 10},
        {"description": "Labor", "quantity": 1, "rate": -5},
        {"description": "Labor", "quantity": "lots", "rate": 10},
    ])
    def test_non_positive_or_non_numeric_rejected(self, item):
        with pytest.raises(ValidationError):
            ledger.price_line_items([item])

    def test_error_points_at_offending_item(self):
        with pytest.raises(ValidationError) as exc_info:
            ledger.price_line_items([
                {"description": "Labor", "quantity": 1, "rate": 10},
                {"description": "Parts", "quantity": -1, "rate": 10},
            ])
        assert exc_info.value.context["line_item"] == 1


class TestComputeTotals:
    def test_sum_of_amounts(self):
        totals = ledger.compute_totals(ledger.price_line_items([
            {"description": "AC Repair", "quantity": 1, "rate": "150.00"},
            {"description": "Parts", "quantity": 3, "rate": "25.50"},
            {"description": "Labor", "quantity": "2.5", "rate": "85.00"},
        ]))
        assert totals.subtotal == Decimal("439.00")
        assert totals.tax == Decimal("0")
        assert totals.total == Decimal("439.00")
        assert totals.balance == totals.total

    def test_single_item(self):
        totals = ledger.compute_totals(
            ledger.price_line_items([{"description": "Labor", "quantity": 2, "rate": 50}])
        )
        assert totals.subtotal == Decimal("100.00")
        assert totals.balance == Decimal("100.00")


class TestPayments:
    """Balance arithmetic for payments"""

    def test_partial_payment(self):
        assert ledger.apply_payment(Decimal("500.00"), 150) == Decimal("350.00")

    def test_exact_payment_clears_balance(self):
        assert ledger.apply_payment(Decimal("100.00"), "100") == Decimal("0.00")

    def test_float_payment_has_no_drift(self):
        balance = Decimal("0.30")
        balance = ledger.apply_payment(balance, 0.1)
        balance = ledger.apply_payment(balance, 0.2)
        assert balance == Decimal("0.00")

    def test_overpayment_rejected(self):
        with pytest.raises(ConflictError, match=r"Payment amount \(100.01\) exceeds remaining balance \(100.00\)"):
            ledger.apply_payment(Decimal("100.00"), "100.01")

    @pytest.mark.parametrize("amount", [None, 0, -10, "0.004", "abc", "NaN"])
    def test_invalid_amounts_rejected(self, amount):
        with pytest.raises(ValidationError):
            ledger.payment_amount(amount)

    def test_whole_cent_amounts_accepted(self):
        assert ledger.payment_amount("10.5") == Decimal("10.50")
        assert ledger.payment_amount(Decimal("10.500")) == Decimal("10.50")

    @pytest.mark.parametrize("amount", ["10.005", Decimal("100.004")])
    def test_fractions_of_a_cent_rejected(self, amount):
        with pytest.raises(ValidationError, match="fractions of a cent"):
            ledger.payment_amount(amount)

    def test_sub_cent_excess_cannot_settle_balance(self):
        with pytest.raises(ValidationError):
            ledger.apply_payment(Decimal("100.00"), Decimal("100.004"))

    @pytest.mark.parametrize("amount", ["1e30", "10000000000.00", "Infinity"])
    def test_amount_beyond_column_range_rejected(self, amount):
        with pytest.raises(ValidationError):
            ledger.payment_amount(amount)


class TestAmountBounds:
    """Amounts must fit a Numeric(12, 2) money column"""

    def test_huge_inputs_rejected(self):
        with pytest.raises(ValidationError, match="exceeds the maximum"):
            ledger.price_line_items([{"description": "x", "quantity": "1e20", "rate": "1e10"}])

    def test_line_amount_too_large(self):
        with pytest.raises(ValidationError, match="Line item amount exceeds") as exc_info:
            ledger.price_line_items([{"description": "x", "quantity": "1000000", "rate": "1000000"}])
        assert exc_info.value.context == {"line_item": 0}

    def test_subtotal_too_large(self):
        priced = ledger.price_line_items([
            {"description": "a", "quantity": 1, "rate": "6000000000"},
            {"description": "b", "quantity": 1, "rate": "6000000000"},
        ])
        with pytest.raises(ValidationError, match="Invoice subtotal exceeds"):
            ledger.compute_totals(priced)

    def test_largest_storable_amount_accepted(self):
        totals = ledger.compute_totals(
            ledger.price_line_items([{"description": "x", "quantity": 1, "rate": "9999999999.99"}])
        )
        assert totals.total == ledger.MAX_AMOUNT
