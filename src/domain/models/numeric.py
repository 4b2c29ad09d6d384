"""Exact fraction value type used for every monetary amount."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from fractions import Fraction
from math import lcm


def _terminating_scale(denom: int) -> int | None:
    """Return the decimal places needed to write 1/denom exactly.

    Args:
        denom: Positive denominator.

    Returns:
        int | None: Smallest k with denom dividing 10**k, or None when the
        expansion does not terminate.
    """
    twos = 0
    fives = 0
    remaining = denom
    while remaining % 2 == 0:
        remaining //= 2
        twos += 1
    while remaining % 5 == 0:
        remaining //= 5
        fives += 1
    if remaining != 1:
        return None
    return max(twos, fives)


@dataclass(frozen=True)
class GncNumeric:
    """Numerator/denominator pair as stored by GnuCash.

    The denominator is kept as given (150/100 is not reduced to 3/2) so the
    smallest-unit scale survives a round trip. Equality is structural; use
    ``compare`` for value ordering.

    Attributes:
        num: Integer numerator, carrying the sign.
        denom: Positive integer denominator.
    """

    num: int
    denom: int = 1

    def __post_init__(self) -> None:
        num = int(self.num)
        denom = int(self.denom)
        if denom == 0:
            raise ValueError("Denominator must be non-zero")
        if denom < 0:
            num, denom = -num, -denom
        object.__setattr__(self, "num", num)
        object.__setattr__(self, "denom", denom)

    @classmethod
    def zero(cls, denom: int = 1) -> "GncNumeric":
        """Return a zero value at the given scale."""
        return cls(0, denom)

    @classmethod
    def parse(cls, text: str) -> "GncNumeric":
        """Parse ``"numerator/denominator"`` or a bare integer.

        Args:
            text: Fraction string from an interchange document.

        Returns:
            GncNumeric: Parsed value; a bare integer has denominator 1.

        Raises:
            ValueError: If the text is not a valid fraction string.
        """
        parts = str(text).strip().split("/")
        if len(parts) == 2:
            return cls(int(parts[0].strip()), int(parts[1].strip()))
        if len(parts) == 1:
            raw = parts[0].strip()
            return cls(int(raw) if raw else 0, 1)
        raise ValueError(f"Invalid fraction string: {text!r}")

    @classmethod
    def from_decimal(cls, value, denom: int = 100) -> "GncNumeric":
        """Round ``value * denom`` to the nearest integer numerator.

        Halves round away from zero. Floats are converted through ``str``
        so that 1.005 means the literal the caller typed.

        Args:
            value: Decimal, int, str or float amount.
            denom: Target denominator (smallest-unit multiplier).

        Returns:
            GncNumeric: Value at the requested scale.

        Raises:
            ValueError: If the value is not a number or is not finite.
        """
        try:
            amount = (
                value if isinstance(value, Decimal) else Decimal(str(value))
            )
        except InvalidOperation as exc:
            raise ValueError(f"Invalid decimal amount: {value!r}") from exc
        if not amount.is_finite():
            raise ValueError(f"Amount must be finite: {value!r}")

        parts = amount.as_tuple()
        with localcontext() as ctx:
            ctx.prec = max(
                28,
                len(parts.digits)
                + max(int(parts.exponent), 0)
                + len(str(abs(denom)))
                + 2,
            )
            try:
                scaled = (amount * denom).quantize(
                    Decimal("1"),
                    rounding=ROUND_HALF_UP,
                )
            except InvalidOperation as exc:
                raise ValueError(
                    f"Cannot scale {value!r} to denominator {denom}"
                ) from exc
        return cls(int(scaled), denom)

    def __add__(self, other: "GncNumeric") -> "GncNumeric":
        if not isinstance(other, GncNumeric):
            return NotImplemented
        common = lcm(self.denom, other.denom)
        return GncNumeric(
            self.num * (common // self.denom)
            + other.num * (common // other.denom),
            common,
        )

    def __neg__(self) -> "GncNumeric":
        return GncNumeric(-self.num, self.denom)

    def __sub__(self, other: "GncNumeric") -> "GncNumeric":
        if not isinstance(other, GncNumeric):
            return NotImplemented
        return self + (-other)

    def __abs__(self) -> "GncNumeric":
        return GncNumeric(abs(self.num), self.denom)

    def __str__(self) -> str:
        return f"{self.num}/{self.denom}"

    def sign(self) -> int:
        """Return -1, 0 or 1."""
        return (self.num > 0) - (self.num < 0)

    def is_zero(self) -> bool:
        return self.num == 0

    def compare(self, other: "GncNumeric") -> int:
        """Compare values exactly, ignoring the denominators' scale."""
        return (self - other).sign()

    def to_fraction(self) -> Fraction:
        return Fraction(self.num, self.denom)

    def to_decimal(self) -> Decimal:
        """Return the value as a Decimal (exact when it terminates)."""
        if _terminating_scale(self.denom) is not None:
            return Decimal(self.to_decimal_string())
        return Decimal(self.num) / Decimal(self.denom)

    def as_tuple(self) -> tuple[int, int]:
        return (self.num, self.denom)

    def to_decimal_string(self) -> str:
        """Render the value as a decimal string by long division.

        Denominators made only of factors 2 and 5 are written exactly with
        the scale of the smallest power of ten they divide (150/100 gives
        "1.50"). Other denominators get one digit more than the
        denominator has, rounded half up, which is enough for
        ``from_decimal`` to recover the numerator.

        Returns:
            str: Decimal representation without exponent notation.
        """
        negative = self.num < 0
        whole, remainder = divmod(abs(self.num), self.denom)
        sign = "-" if negative else ""
        if remainder == 0:
            return f"{sign}{whole}"

        places = _terminating_scale(self.denom)
        if places is None:
            places = len(str(self.denom)) + 1

        digits: list[int] = []
        for _ in range(places):
            remainder *= 10
            digit, remainder = divmod(remainder, self.denom)
            digits.append(digit)

        if remainder * 2 >= self.denom:
            index = len(digits) - 1
            while index >= 0:
                if digits[index] == 9:
                    digits[index] = 0
                    index -= 1
                else:
                    digits[index] += 1
                    break
            else:
                whole += 1

        fraction = "".join(str(digit) for digit in digits)
        return f"{sign}{whole}.{fraction}"


def sum_numerics(values) -> GncNumeric:
    """Add numerics exactly over a common denominator."""
    total = GncNumeric.zero()
    for value in values:
        total = total + value
    return total


__all__ = ["GncNumeric", "sum_numerics"]
