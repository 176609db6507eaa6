"""Pricing calculator: effective unit prices from base prices and discounts.

This is the only place where prices are rounded. Totals built on top of the
per-line prices are summed exactly and never re-rounded.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

from boutique.pricing.discount import DiscountType, EffectivePrice

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def _to_decimal(amount) -> Decimal:
    # str() keeps the literal value of floats such as 0.1
    return amount if isinstance(amount, Decimal) else Decimal(str(amount))


def round2(amount) -> float:
    """Round to two decimal places, half-up."""
    return float(_to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP))


def compute_effective_price(base_price, discount=None) -> EffectivePrice:
    """Derive the effective unit price of a catalog entry.

    Args:
        base_price: Non-negative catalog price.
        discount: Optional object exposing ``discount_type`` and ``value``
            (usually a ``Discount`` value object).

    Raises:
        ValidationError: ``base_price`` is negative, the discount type is not
            recognised, or a percentage exceeds 100.
    """
    if base_price is None or base_price < 0:
        raise ValidationError({"base_price": [f"Base price must be zero or positive, got {base_price!r}"]})

    if discount is None or discount.value is None or discount.value <= 0:
        return EffectivePrice(unit_price=float(base_price))

    try:
        discount_type = DiscountType(discount.discount_type)
    except ValueError:
        raise ValidationError(
            {"discount_type": [f"Unknown discount type {discount.discount_type!r}"]}
        ) from None

    base = _to_decimal(base_price)
    value = _to_decimal(discount.value)

    if discount_type == DiscountType.PERCENTAGE:
        if value > _HUNDRED:
            raise ValidationError({"value": ["Percentage discount cannot exceed 100"]})
        discounted = base * (_HUNDRED - value) / _HUNDRED
    else:
        discounted = base - value

    unit_price = max(Decimal("0"), discounted)
    return EffectivePrice(
        unit_price=round2(unit_price),
        original_unit_price=float(base_price),
    )


def line_total(unit_price, quantity) -> Decimal:
    return _to_decimal(unit_price) * quantity


def sum_line_totals(lines: Iterable) -> float:
    """Exact sum of ``unit_price * quantity`` over lines, without rounding."""
    return float(sum((line_total(line.unit_price, line.quantity) for line in lines), Decimal("0")))
