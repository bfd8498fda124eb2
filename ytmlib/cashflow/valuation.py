"""Present value of a dated cash flow and its derivative with respect to rate.

Both sums discount every entry to the earliest date of the cash flow:

    PV(r)  = sum( amount * (1 + r) ** -t )
    PV'(r) = sum( amount * (1 + r) ** (-t - 1) * -t )

where ``t`` is the year fraction from the earliest date under the chosen day
count convention. The power is the only floating-point operation; its results
are brought back to Decimal and everything else runs in the library decimal
context.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from functools import reduce
from typing import List, Mapping, Sequence, Tuple, Union

import logging

import numpy as np

from ytmlib.cashflow.types import CashFlowEntry, normalize_cash_flow
from ytmlib.utils.date import DateLike, to_date
from ytmlib.utils.daycount import DayCountConvention, get_day_count
from ytmlib.utils.decimals import (
    DECIMAL_CONTEXT,
    ONE,
    ZERO,
    DecimalLike,
    from_float,
    to_decimal,
)

logger = logging.getLogger(__name__)

Convention = Union[str, DayCountConvention]


def time_fractions(
    cash_flow: Mapping[DateLike, DecimalLike],
    convention: Convention = DayCountConvention.ACTUAL_365,
) -> List[Tuple[CashFlowEntry, Decimal]]:
    """Pair every entry with its year fraction from the earliest date."""
    normalized = normalize_cash_flow(cash_flow)
    if not normalized:
        return []
    start_date = min(normalized)
    dc_func = get_day_count(convention)
    return [
        (CashFlowEntry(day, amount), dc_func(start_date, day))
        for day, amount in normalized.items()
    ]


def _discount_base(rate: Decimal) -> float:
    base = DECIMAL_CONTEXT.add(ONE, rate)
    if base <= ZERO:
        raise ValueError(f"1 + rate must be positive, got rate={rate}")
    return float(base)


def _powers(base: float, exponents: Sequence[float]) -> List[Decimal]:
    with np.errstate(over="ignore", under="ignore"):
        values = np.power(base, np.asarray(exponents, dtype=np.float64))
    return [from_float(value) for value in values]


def _total(terms: Sequence[Decimal]) -> Decimal:
    return reduce(DECIMAL_CONTEXT.add, terms, ZERO)


def discount_amount(
    start_date: DateLike,
    entry: CashFlowEntry,
    rate: DecimalLike,
    convention: Convention = DayCountConvention.ACTUAL_365,
) -> Decimal:
    """Discount one payment back to ``start_date`` at ``rate``."""
    rate = to_decimal(rate)
    t = get_day_count(convention)(to_date(start_date), entry.date)
    (factor,) = _powers(_discount_base(rate), [-float(t)])
    discounted = DECIMAL_CONTEXT.multiply(entry.amount, factor)
    logger.debug("Discounted payment %s for %s => %s", discounted, entry.date, entry.amount)
    return discounted


def present_value(
    cash_flow: Mapping[DateLike, DecimalLike],
    rate: DecimalLike,
    convention: Convention = DayCountConvention.ACTUAL_365,
) -> Decimal:
    """Sum of the cash flow discounted to its earliest date at ``rate``."""
    rate = to_decimal(rate)
    fractions = time_fractions(cash_flow, convention)
    if not fractions:
        return ZERO

    factors = _powers(_discount_base(rate), [-float(t) for _, t in fractions])
    total = _total(
        [
            DECIMAL_CONTEXT.multiply(entry.amount, factor)
            for (entry, _), factor in zip(fractions, factors)
        ]
    )
    logger.debug("Sum of discounted cash flow at rate %s: %s", rate, total)
    return total


def present_value_derivative(
    cash_flow: Mapping[DateLike, DecimalLike],
    rate: DecimalLike,
    convention: Convention = DayCountConvention.ACTUAL_365,
) -> Decimal:
    """Derivative of ``present_value`` with respect to ``rate``."""
    rate = to_decimal(rate)
    fractions = time_fractions(cash_flow, convention)
    if not fractions:
        return ZERO

    factors = _powers(_discount_base(rate), [-float(t) - 1.0 for _, t in fractions])
    total = _total(
        [
            DECIMAL_CONTEXT.multiply(
                DECIMAL_CONTEXT.multiply(entry.amount, factor), DECIMAL_CONTEXT.minus(t)
            )
            for (entry, t), factor in zip(fractions, factors)
        ]
    )
    logger.debug("Sum of derivative discounted cash flow at rate %s: %s", rate, total)
    return total


def valuation_start_date(cash_flow: Mapping[DateLike, DecimalLike]) -> date:
    """Earliest date of a non-empty cash flow."""
    normalized = normalize_cash_flow(cash_flow)
    if not normalized:
        raise ValueError("cash_flow must not be empty")
    return min(normalized)
