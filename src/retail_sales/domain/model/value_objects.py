"""Money and Discount, the immutable values prices are built from."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from retail_sales.domain.exceptions import ValidationError

CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero (never banker's rounding)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """A non-negative amount in one currency.

    Amounts are kept at full precision; rounding to cents happens only
    where a price is displayed or a discount is derived.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be a finite number, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = "USD") -> Money:
        """Parse *amount* (usually user input) into Money."""
        try:
            value = Decimal(str(amount))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._check_currency(other)
        if other.amount > self.amount:
            raise ValidationError(f"Cannot subtract {other} from {self}")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, quantity: int) -> Money:
        if not isinstance(quantity, int):
            raise TypeError(f"Money can only be multiplied by an int, got {quantity!r}")
        return Money(self.amount * quantity, self.currency)

    def __str__(self) -> str:
        return f"${round_money(self.amount):.2f}"

    def _check_currency(self, other: Money) -> None:
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")


@dataclass(frozen=True)
class Discount:
    """A discount percentage and the rounded amount it yields.

    Only build one through ``Discount.none()`` or
    ``Discount.from_percentage()`` so the two fields can never disagree.
    """

    percentage: Decimal
    amount: Decimal

    @staticmethod
    def none() -> Discount:
        return Discount(Decimal("0"), Decimal("0.00"))

    @staticmethod
    def from_percentage(percentage: Decimal, base: Decimal) -> Discount:
        """Apply *percentage* to *base*, rounding the amount to cents."""
        if percentage < 0 or percentage > 100:
            raise ValidationError("Discount percentage must be between 0 and 100")
        amount = round_money(base * percentage / Decimal("100"))
        return Discount(percentage, amount)

    @property
    def is_applied(self) -> bool:
        return self.percentage > 0 and self.amount > 0

    def __str__(self) -> str:
        return f"{self.percentage:g}%"
