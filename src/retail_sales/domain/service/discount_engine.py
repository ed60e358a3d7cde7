"""Domain service: quantity-tiered discounts.

Pure functions only.  The tier depends on how many identical units sit on
a single sale line:

    1-3    ->  0%
    4-9    -> 10%
    10-20  -> 20%

Anything outside 1-20 is rejected, as is a unit price that is not
positive or that exceeds the price ceiling.
"""

from __future__ import annotations

from decimal import Decimal

from retail_sales.domain.exceptions import (
    InvalidPrice,
    InvalidQuantity,
    PriceLimitExceeded,
    QuantityLimitExceeded,
)
from retail_sales.domain.model.value_objects import Discount

# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_QUANTITY_PER_PRODUCT = 20
MAX_UNIT_PRICE = Decimal("1000000")
MIN_DISCOUNT_QUANTITY = 4
HIGH_TIER_QUANTITY = 10
LOW_TIER_PERCENTAGE = Decimal("10")
HIGH_TIER_PERCENTAGE = Decimal("20")


def validate_quantity_limits(quantity: int) -> None:
    """Check only the quantity range; no price involved."""
    if quantity <= 0:
        raise InvalidQuantity("Quantity must be greater than zero")
    if quantity > MAX_QUANTITY_PER_PRODUCT:
        raise QuantityLimitExceeded(
            f"Cannot sell more than {MAX_QUANTITY_PER_PRODUCT} identical items"
        )


def validate_unit_price(unit_price: Decimal) -> None:
    if not unit_price.is_finite() or unit_price <= 0:
        raise InvalidPrice("Unit price must be greater than zero")
    if unit_price > MAX_UNIT_PRICE:
        raise PriceLimitExceeded(
            f"Unit price {unit_price} exceeds the maximum of {MAX_UNIT_PRICE}"
        )


def is_eligible_for_discount(quantity: int) -> bool:
    return MIN_DISCOUNT_QUANTITY <= quantity <= MAX_QUANTITY_PER_PRODUCT


def discount_percentage(quantity: int) -> Decimal:
    """Return the tier percentage for an already-validated quantity."""
    if quantity >= HIGH_TIER_QUANTITY:
        return HIGH_TIER_PERCENTAGE
    if quantity >= MIN_DISCOUNT_QUANTITY:
        return LOW_TIER_PERCENTAGE
    return Decimal("0")


def calculate_discount(quantity: int, unit_price: Decimal) -> Discount:
    """Compute the discount for *quantity* units at *unit_price*.

    The amount is ``price * quantity * pct / 100`` rounded to cents,
    halves away from zero.
    """
    validate_quantity_limits(quantity)
    validate_unit_price(unit_price)

    if not is_eligible_for_discount(quantity):
        return Discount.none()
    return Discount.from_percentage(
        discount_percentage(quantity), unit_price * quantity
    )
