"""
Values -- Immutable, self-rounding monetary value objects.

Responsibility:
    Provides the two value types every invoice computation runs on: Money
    (2 fractional digits) and Rate (4 fractional digits).  These replace raw
    Decimal wherever an amount or a rate appears in domain logic.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module.  No outward dependencies except
    invoice_kernel.exceptions.

Invariants enforced:
    - Decimal-only arithmetic: floats are refused at construction, so no
      binary floating-point error can enter an amount.
    - Scale is fixed on construction: Money always carries exactly 2
      fractional digits and Rate exactly 4, rounded ROUND_HALF_UP (ties away
      from zero, never banker's rounding).
    - Every operation returns a new value; instances never change.

Failure modes:
    - InvalidAmountError on construction from non-numeric, non-finite,
      float or boolean input.
    - UnsupportedOperandError when Money arithmetic meets an operand that is
      not Money (for + and -) or not Rate / int / Decimal (for *).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Union

from invoice_kernel.exceptions import InvalidAmountError, UnsupportedOperandError

MONEY_DECIMAL_PLACES = 2
RATE_DECIMAL_PLACES = 4

_MONEY_QUANTUM = Decimal("0.01")
_RATE_QUANTUM = Decimal("0.0001")
_HUNDRED = Decimal("100")


def _to_decimal(raw: Any) -> Decimal:
    """Coerce int / Decimal / numeric string into a finite Decimal."""
    # bool is an int subclass; True is not an amount
    if isinstance(raw, bool):
        raise InvalidAmountError(raw, "booleans are not amounts")
    if isinstance(raw, float):
        raise InvalidAmountError(raw, "floats are not accepted, pass a string or Decimal")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as e:
            raise InvalidAmountError(raw) from e
    else:
        raise InvalidAmountError(raw)

    if not value.is_finite():
        raise InvalidAmountError(raw, "must be finite")
    return value


def _quantize(value: Decimal, quantum: Decimal, raw: Any) -> Decimal:
    try:
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidAmountError(raw, "is out of range") from e
    # Fold -0.00 into 0.00 so rendering never shows a signed zero
    if rounded.is_zero():
        rounded = abs(rounded)
    return rounded


def _sign(difference: Decimal) -> int:
    if difference < 0:
        return -1
    if difference > 0:
        return 1
    return 0


@dataclass(frozen=True, slots=True)
class Rate:
    """
    Fractional rate value object (fee rate, tax rate).

    Contract:
        Wraps a Decimal fraction rounded half-up to 4 digits.  0.04 means
        four percent.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - value is always a Decimal with exponent -4
        - str() renders exactly 4 fractional digits ("0.0400")

    Non-goals:
        - Does NOT restrict the range; callers decide what rates are sensible
        - Does NOT do arithmetic of its own; Money multiplies by a Rate
    """

    value: Decimal

    def __post_init__(self) -> None:
        raw = self.value
        object.__setattr__(self, "value", _quantize(_to_decimal(raw), _RATE_QUANTUM, raw))

    @classmethod
    def of(cls, raw: Rate | Decimal | int | str) -> Rate:
        """
        Build a Rate from a decimal-convertible input.

        Raises:
            InvalidAmountError: If raw is not a finite number.
        """
        if isinstance(raw, Rate):
            return raw
        return cls(raw)

    def compare(self, other: Rate) -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        return _sign(self.value - other.value)

    def to_percent(self) -> str:
        """Render value x 100 with 2 fractional digits (0.045 -> "4.50")."""
        percent = (self.value * _HUNDRED).quantize(_MONEY_QUANTUM, rounding=ROUND_HALF_UP)
        return f"{percent:.2f}"

    def __lt__(self, other: Rate) -> bool:
        if not isinstance(other, Rate):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: Rate) -> bool:
        if not isinstance(other, Rate):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: Rate) -> bool:
        if not isinstance(other, Rate):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: Rate) -> bool:
        if not isinstance(other, Rate):
            return NotImplemented
        return self.value >= other.value

    def __str__(self) -> str:
        return f"{self.value:.4f}"

    def __repr__(self) -> str:
        return f"Rate({str(self)!r})"


Scalar = Union[int, Decimal]


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Wraps a Decimal amount rounded half-up to 2 digits.  There is a
        single currency in this system, so Money carries no currency code.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - amount is always a Decimal with exponent -2 (never float)
        - every arithmetic result is re-rounded to 2 digits
        - str() renders exactly 2 fractional digits, no separators or symbol

    Non-goals:
        - Does NOT enforce positivity (invoice validation does that)
        - Does NOT support division; nothing in invoicing divides money
    """

    amount: Decimal

    def __post_init__(self) -> None:
        raw = self.amount
        object.__setattr__(self, "amount", _quantize(_to_decimal(raw), _MONEY_QUANTUM, raw))

    @classmethod
    def of(cls, raw: Money | Decimal | int | str) -> Money:
        """
        Factory method for creating Money.

        Preconditions:
            - raw is an int, a Decimal, a numeric string or a Money
              (no float allowed at call site)

        Postconditions:
            - Returns an immutable Money rounded half-up to 2 digits

        Raises:
            InvalidAmountError: If raw is not a finite number.
        """
        if isinstance(raw, Money):
            return raw
        return cls(raw)

    @classmethod
    def zero(cls) -> Money:
        """Create a zero amount."""
        return cls(Decimal("0"))

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def add(self, other: Money) -> Money:
        """Exact decimal sum, re-rounded to 2 digits."""
        if not isinstance(other, Money):
            raise UnsupportedOperandError("add", other)
        return Money(self.amount + other.amount)

    def subtract(self, other: Money) -> Money:
        """Exact decimal difference, re-rounded to 2 digits."""
        if not isinstance(other, Money):
            raise UnsupportedOperandError("subtract", other)
        return Money(self.amount - other.amount)

    def multiply(self, operand: Rate | Scalar) -> Money:
        """
        Multiply by a Rate's value or by a plain int / Decimal scalar.

        Postconditions:
            - The exact product is rounded half-up to 2 digits once.

        Raises:
            UnsupportedOperandError: For any other operand type (float,
                str, Money, bool, ...).
        """
        if isinstance(operand, Rate):
            factor = operand.value
        elif isinstance(operand, Decimal) or (
            isinstance(operand, int) and not isinstance(operand, bool)
        ):
            factor = Decimal(operand)
        else:
            raise UnsupportedOperandError("multiply", operand)
        return Money(self.amount * factor)

    def compare(self, other: Money) -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        if not isinstance(other, Money):
            raise UnsupportedOperandError("compare", other)
        return _sign(self.amount - other.amount)

    def __add__(self, other: Money) -> Money:
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        return self.subtract(other)

    def __mul__(self, operand: Rate | Scalar) -> Money:
        return self.multiply(operand)

    def __rmul__(self, operand: Rate | Scalar) -> Money:
        return self.multiply(operand)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    def __repr__(self) -> str:
        return f"Money({str(self)!r})"
