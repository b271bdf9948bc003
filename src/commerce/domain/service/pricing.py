"""Money arithmetic that spans several amounts.

Everything here works on ``Money`` (fixed two-place Decimal), so the same
inputs always produce the same total no matter how often it is recomputed.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from commerce.domain.exceptions import InvalidMoneyValueError
from commerce.domain.model.value_objects import Money


def compute_total(subtotal: Money, tax: Money, shipping_cost: Money, discount: Money) -> Money:
    """Return ``subtotal + tax + shipping_cost - discount``.

    Negative inputs are already impossible (``Money`` refuses them); a
    discount larger than everything else raises InvalidMoneyValueError.
    """
    gross = subtotal + tax + shipping_cost
    if discount > gross:
        raise InvalidMoneyValueError(
            f"Discount {discount} exceeds order value {gross}"
        )
    return gross - discount


def calculate_discount_percent(price: Money, compare_price: Money | None) -> int:
    """Whole-number percentage saved against *compare_price*, or 0."""
    if compare_price is None or compare_price <= price:
        return 0
    ratio = (compare_price.amount - price.amount) / compare_price.amount * 100
    return int(ratio.quantize(Decimal("1"), ROUND_HALF_UP))


def calculate_tax(subtotal: Money, rate: Decimal | str) -> Money:
    """Tax on *subtotal* at *rate* (e.g. ``"0.08"``), rounded half-up to cents."""
    try:
        rate = Decimal(str(rate))
    except InvalidOperation as exc:
        raise InvalidMoneyValueError(f"Invalid tax rate: {rate!r}") from exc
    if not rate.is_finite():
        raise InvalidMoneyValueError(f"Tax rate must be a finite number, got {rate}")
    if rate < 0:
        raise InvalidMoneyValueError(f"Tax rate cannot be negative, got {rate}")
    return Money(subtotal.amount * rate, subtotal.currency)
