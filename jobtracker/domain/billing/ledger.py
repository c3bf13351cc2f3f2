"""
Invoice and payment arithmetic.

Every monetary step is rounded to cents immediately (round2) so fractional
cents never accumulate across line items or payments. Amounts are bounded to
what a Numeric(12, 2) money column can hold.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from ...shared.errors import ConflictError, ValidationError
from ...shared.money import ZERO, Number, format_money, round2, to_decimal

# Tax is not modelled yet; every invoice carries a zero tax line
TAX_AMOUNT = ZERO

# Largest value a Numeric(12, 2) column stores: 10 integer digits
MAX_AMOUNT = Decimal("9999999999.99")


@dataclass(frozen=True)
class PricedLineItem:
    description: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal

    def to_json(self) -> dict:
        """Shape stored in the invoice's line_items column"""
        return {
            "description": self.description,
            "quantity": float(self.quantity),
            "rate": float(self.rate),
            "amount": float(self.amount),
        }


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    balance: Decimal


def _field(item: Union[Mapping[str, Any], Any], name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _cents(value: Decimal, name: str, context: Optional[dict] = None) -> Decimal:
    """round2, rejecting anything a money column cannot store"""
    too_large = f"{name} exceeds the maximum of {format_money(MAX_AMOUNT)}"
    try:
        amount = round2(value)
    except ValueError:
        raise ValidationError(too_large, context) from None
    if amount > MAX_AMOUNT:
        raise ValidationError(too_large, context)
    return amount


def _positive(value: Any, name: str, index: int) -> Decimal:
    if value is None:
        raise ValidationError(
            "Each line item must have description, quantity, and rate", {"line_item": index}
        )
    try:
        number = to_decimal(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Line item {name} must be a number", {"line_item": index}) from None
    if not number.is_finite() or number <= 0:
        raise ValidationError(
            f"Line item {name} must be greater than 0", {"line_item": index, name: str(value)}
        )
    if number > MAX_AMOUNT:
        raise ValidationError(
            f"Line item {name} exceeds the maximum of {format_money(MAX_AMOUNT)}",
            {"line_item": index, name: str(value)},
        )
    return number


def price_line_items(items: Iterable[Any]) -> list[PricedLineItem]:
    """
    Validate raw line items and compute each amount as round2(quantity * rate).

    Items may be mappings or objects exposing description/quantity/rate.
    """
    items = list(items or [])
    if not items:
        raise ValidationError("line_items is required and must be a non-empty array")

    priced = []
    for index, item in enumerate(items):
        description = _field(item, "description")
        if description is None or not str(description).strip():
            raise ValidationError(
                "Each line item must have description, quantity, and rate", {"line_item": index}
            )
        quantity = _positive(_field(item, "quantity"), "quantity", index)
        rate = _positive(_field(item, "rate"), "rate", index)
        priced.append(
            PricedLineItem(
                description=str(description).strip(),
                quantity=quantity,
                rate=rate,
                amount=_cents(quantity * rate, "Line item amount", {"line_item": index}),
            )
        )
    return priced


def compute_totals(items: Iterable[PricedLineItem]) -> InvoiceTotals:
    """subtotal = round2(sum of amounts); tax is zero; opening balance equals total"""
    subtotal = _cents(sum((item.amount for item in items), ZERO), "Invoice subtotal")
    tax = TAX_AMOUNT
    total = _cents(subtotal + tax, "Invoice total")
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=total, balance=total)


def payment_amount(amount: Number) -> Decimal:
    """
    Validate a payment amount.

    The amount must be positive and already in whole cents: 100.004 is
    rejected rather than rounded, so it can never settle a 100.00 balance.
    """
    if amount is None:
        raise ValidationError("amount is required and must be greater than 0")
    try:
        amount = to_decimal(amount)
    except (TypeError, ValueError):
        raise ValidationError("amount must be a number", {"amount": str(amount)}) from None

    context = {"amount": str(amount)}
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("amount is required and must be greater than 0", context)

    cents = _cents(amount, "amount", context)
    if cents != amount:
        raise ValidationError("amount cannot include fractions of a cent", context)
    return cents


def apply_payment(balance: Number, amount: Number) -> Decimal:
    """
    New balance after paying ``amount`` against ``balance``.

    Exact payment of the balance is allowed and yields zero; anything above
    it is rejected so a balance never goes negative.
    """
    amount = payment_amount(amount)
    balance = round2(balance)

    if amount > balance:
        raise ConflictError(
            f"Payment amount ({format_money(amount)}) exceeds remaining balance ({format_money(balance)})",
            {"amount": float(amount), "balance": float(balance)},
        )

    return round2(balance - amount)
