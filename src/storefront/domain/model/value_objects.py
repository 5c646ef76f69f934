"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError

MIN_QUANTITY = 1
MAX_QUANTITY = 99


@dataclass(frozen=True)
class Money:
    """Monetary amount in whole pesos.

    Prices in the store carry no cents, so the amount is a plain ``int``.
    """

    amount: int
    currency: str = "ARS"

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an int, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${format_pesos(self.amount)}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(0)

    @staticmethod
    def of(amount: str | float | int) -> Money:
        """Convenient factory that coerces whole-peso values to int."""
        try:
            value = float(amount)
            whole = int(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if value != whole:
            raise ValidationError(f"Money amount must be whole pesos: {amount!r}")
        return Money(whole)


def format_pesos(amount: int) -> str:
    """Group thousands with dots, the way es-AR prints numbers."""
    return f"{amount:,}".replace(",", ".")


@dataclass(frozen=True)
class Quantity:
    """A line quantity between MIN_QUANTITY and MAX_QUANTITY."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < MIN_QUANTITY:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_QUANTITY:
            raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}")

    @staticmethod
    def clamp(value: int) -> Quantity:
        return Quantity(max(MIN_QUANTITY, min(MAX_QUANTITY, value)))

    def __str__(self) -> str:
        return str(self.value)
