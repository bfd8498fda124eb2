"""Decimal arithmetic helpers shared by valuation and root finding."""

from __future__ import annotations

import numbers
import re
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Union

from ytmlib.config import DECIMAL_PRECISION, DECIMAL_SCALE

DecimalLike = Union[Decimal, int, float, str]

ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)

# Comma allowed only as a thousands separator: "1,000.50", not "1,5".
_THOUSANDS = re.compile(r"^[-+]?\d{1,3}(,\d{3})+(\.\d+)?$")

# HALF_UP everywhere: divisions, the Newton step and the reported percentage.
DECIMAL_CONTEXT = Context(
    prec=DECIMAL_PRECISION,
    rounding=ROUND_HALF_UP,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def to_decimal(value: DecimalLike) -> Decimal:
    """Convert a number-like value to a finite Decimal.

    Floats go through their shortest repr, so ``0.1`` becomes ``Decimal("0.1")``
    rather than the exact binary expansion.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise TypeError(f"Unsupported type for amount: {type(value)}")
    elif isinstance(value, numbers.Integral):
        result = Decimal(int(value))
    elif isinstance(value, numbers.Real):
        result = Decimal(repr(float(value)))
    elif isinstance(value, str):
        text = value.strip()
        if "," in text:
            if not _THOUSANDS.match(text):
                raise ValueError(f"Unsupported decimal string: {value!r}")
            text = text.replace(",", "")
        try:
            result = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Unsupported decimal string: {value!r}") from exc
    else:
        raise TypeError(f"Unsupported type for amount: {type(value)}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def from_float(value: float) -> Decimal:
    """Decimal from a float result (shortest repr), rejecting inf/nan."""
    value = float(value)
    if value != value:
        raise ValueError("Floating-point result is not a number")
    if value in (float("inf"), float("-inf")):
        raise OverflowError("Floating-point result overflowed")
    return Decimal(repr(value))


def divide(numerator: Decimal, denominator: Decimal, scale: int = DECIMAL_SCALE) -> Decimal:
    """Divide and round HALF_UP to ``scale`` fractional digits.

    Quotients too large to hold ``scale`` fractional digits within the context
    precision keep the context precision instead.
    """
    quotient = DECIMAL_CONTEXT.divide(numerator, denominator)
    if quotient.adjusted() + scale < DECIMAL_CONTEXT.prec:
        quotient = quotient.quantize(Decimal(1).scaleb(-scale), context=DECIMAL_CONTEXT)
    return quotient


def round_significant(value: Decimal, digits: int) -> Decimal:
    """Round to ``digits`` significant digits, HALF_UP."""
    return Context(prec=digits, rounding=ROUND_HALF_UP).plus(value)
