# src/propath/domain/money.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from propath.domain.errors import InvalidArgumentError

ZERO = Decimal("0")
TWELVE = Decimal("12")
HUNDRED = Decimal("100")

CURRENCY_PLACES = 2
RATE_PLACES = 4

# NUMERIC(19, 2): at most 17 integer digits
MAX_MAGNITUDE = Decimal("1e17")


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def _checked(d: Decimal, value: Any, field_name: str) -> Decimal:
    if not d.is_finite():
        raise InvalidArgumentError(f"Invalid numeric value for {field_name}: {value!r}")
    if abs(d) >= MAX_MAGNITUDE:
        raise InvalidArgumentError(f"Value out of range for {field_name}: {value!r}")
    return d


def to_decimal(value: Any, field_name: str = "value") -> Decimal | None:
    """
    Coerce values like:
      - 250000
      - 1800.5
      - "250000"
      - "$250,000.00"
      - "6.5%"
    into Decimal. Floats go through str() so 0.1 stays 0.1.

    NaN, infinities and magnitudes a NUMERIC(19, 2) column cannot hold raise
    InvalidArgumentError.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        return _checked(value, value, field_name)
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid type for {field_name}: bool")
    if isinstance(value, int):
        return _checked(Decimal(value), value, field_name)
    if isinstance(value, float):
        return _checked(Decimal(str(value)), value, field_name)
    if isinstance(value, str):
        s = value.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            s = s[:-1].strip()
        if not s:
            return None
        try:
            d = Decimal(s)
        except InvalidOperation as err:
            raise InvalidArgumentError(f"Invalid numeric value for {field_name}: {value!r}") from err
        return _checked(d, value, field_name)
    raise InvalidArgumentError(f"Invalid type for {field_name}: {type(value).__name__}")


def round_currency(value: Decimal) -> Decimal:
    return value.quantize(_quantum(CURRENCY_PLACES), rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    return value.quantize(_quantum(RATE_PLACES), rounding=ROUND_HALF_UP)


def safe_divide(numerator: Decimal, denominator: Decimal, places: int = RATE_PLACES) -> Decimal:
    """
    Quotient rounded half-up to `places` digits.

    A zero denominator yields zero (empty portfolio, zero value, zero down
    payment).
    """
    if denominator == ZERO:
        return ZERO
    return (numerator / denominator).quantize(_quantum(places), rounding=ROUND_HALF_UP)


def percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    # quotient is rounded to 4 places first, then scaled: 0.0672 -> 6.72
    return safe_divide(numerator, denominator, RATE_PLACES) * HUNDRED
