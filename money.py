"""Integer-cent arithmetic.

Amounts are stored and compared as integer cents everywhere; conversion to
major units only happens at presentation boundaries.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, ROUND_FLOOR
from typing import List, Union

from errors import ValidationError

CENTS = Decimal("0.01")

AmountInput = Union[int, float, str, Decimal]


def to_cents(value: AmountInput) -> int:
    """Convert a major-unit amount to integer cents.

    Accepts Decimal, float, int (major units) or text such as "12.34" or
    "12,34". Rounds half-up to the nearest cent.

    Raises:
        ValidationError: If the value is not numeric, not finite or negative.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")

    if isinstance(value, str):
        text = value.strip().replace(" ", "")
        if not text:
            raise ValidationError("Amount is required")
        # "1.234,56" and "1,234.56" both resolve to the last separator
        if "," in text and "." in text:
            if text.rfind(",") > text.rfind("."):
                text = text.replace(".", "").replace(",", ".")
            else:
                text = text.replace(",", "")
        else:
            text = text.replace(",", ".")
        value = text

    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative: {value!r}")

    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents to a two-place Decimal in major units."""
    return (Decimal(cents) / 100).quantize(CENTS)


def format_cents(cents: int) -> str:
    """Format cents for display, e.g. 123456 -> "1,234.56"."""
    return f"{from_cents(cents):,.2f}"


def round_half_up_div(numerator: int, denominator: int) -> int:
    """Divide two integers, rounding the quotient half-up."""
    return int(
        (Decimal(numerator) / Decimal(denominator)).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
    )


def split_cents(total: int, count: int) -> List[int]:
    """Split a total into ``count`` installment values that sum to ``total``.

    Every installment after the first carries round_half_up(total / count);
    the first one carries whatever is left so the literal sum is exact:

        >>> split_cents(10000, 3)
        [3334, 3333, 3333]

    When rounding up would leave the first installment negative (totals of a
    few cents spread over many installments), the regular value falls back
    to floor(total / count) and the first installment takes total % count
    on top of it.

    Raises:
        ValidationError: If count < 1 or total < 0.
    """
    if count < 1:
        raise ValidationError(f"Installment count must be at least 1, got {count}")
    if total < 0:
        raise ValidationError(f"Total cannot be negative, got {total}")

    regular = round_half_up_div(total, count)
    first = total - regular * (count - 1)
    if first < 0:
        regular = int(
            (Decimal(total) / Decimal(count)).to_integral_value(rounding=ROUND_FLOOR)
        )
        first = total - regular * (count - 1)

    return [first] + [regular] * (count - 1)
