"""Effective rate (APR, IRR, YTM) of a dated cash flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Mapping, Optional, Union

import logging

from ytmlib.cashflow.types import CashFlowShape, cash_flow_shape, normalize_cash_flow
from ytmlib.cashflow.valuation import present_value, present_value_derivative
from ytmlib.config import DEFAULT_SETTINGS, SolverSettings
from ytmlib.utils.date import DateLike, datetime_to_str
from ytmlib.utils.daycount import DayCountConvention
from ytmlib.utils.decimals import (
    DECIMAL_CONTEXT,
    HUNDRED,
    ZERO,
    DecimalLike,
    round_significant,
)
from ytmlib.utils.rootfinding import RootFindingError, newton_raphson

logger = logging.getLogger(__name__)


@dataclass
class RateResult:
    """Outcome of one effective-rate solve.

    Attributes:
        rate: Percentage rounded to the reporting precision
        root: Unrounded decimal root (0.2 for 20%)
        iterations: Newton iterations used
        convention: Day count convention used for discounting
        history: Trial values visited by the solver
    """

    rate: Decimal
    root: Decimal
    iterations: int
    convention: DayCountConvention
    history: List[Decimal] = field(default_factory=list)


class RateNotFoundError(RuntimeError):
    """Raised when no effective rate can be determined for a cash flow."""

    def __init__(self, shape: CashFlowShape, convention: DayCountConvention, kind: str) -> None:
        span = (
            f"{datetime_to_str(shape.start_date)} to {datetime_to_str(shape.end_date)}, "
            f"{shape.span_days} days"
            if shape.start_date is not None and shape.end_date is not None
            else "no dates"
        )
        super().__init__(
            f"Can't find effective rate for cash flow of {shape.entry_count} entries "
            f"({span}, {convention}): {kind}"
        )
        self.shape = shape
        self.entry_count = shape.entry_count
        self.start_date = shape.start_date
        self.end_date = shape.end_date
        self.convention = convention
        self.kind = kind


def solve_effective_rate(
    cash_flow: Optional[Mapping[DateLike, DecimalLike]],
    convention: Union[str, DayCountConvention] = DayCountConvention.ACTUAL_365,
    *,
    settings: Optional[SolverSettings] = None,
) -> RateResult:
    """Solve the effective rate and keep the solver diagnostics.

    An absent or empty cash flow yields a zero rate without solving.
    """
    settings = settings or DEFAULT_SETTINGS
    convention = DayCountConvention.from_name(convention)
    flows = normalize_cash_flow(cash_flow)
    if not flows:
        return RateResult(ZERO, ZERO, 0, convention)

    def objective(rate: Decimal) -> Decimal:
        return present_value(flows, rate, convention)

    def slope(rate: Decimal) -> Decimal:
        return present_value_derivative(flows, rate, convention)

    try:
        result = newton_raphson(
            objective,
            slope,
            tolerance=settings.tolerance,
            max_iterations=settings.max_iterations,
            max_range=settings.max_range,
            scale=settings.scale,
        )
    except RootFindingError as exc:
        shape = cash_flow_shape(flows)
        logger.error(
            "Rate not found (%s) for %s entries from %s to %s: %s",
            exc.kind,
            shape.entry_count,
            shape.start_date,
            shape.end_date,
            exc,
        )
        raise RateNotFoundError(shape, convention, exc.kind) from exc

    rate = round_significant(
        DECIMAL_CONTEXT.multiply(result.root, HUNDRED), settings.reporting_digits
    )
    logger.info("Found the rate %s after %s iterations", rate, result.iterations)
    return RateResult(rate, result.root, result.iterations, convention, result.history)


def effective_rate(
    cash_flow: Optional[Mapping[DateLike, DecimalLike]],
    convention: Union[str, DayCountConvention] = DayCountConvention.ACTUAL_365,
    *,
    settings: Optional[SolverSettings] = None,
) -> Decimal:
    """Return the effective rate of a cash flow, in percent.

    The cash flow maps payment dates to signed amounts: negative for money
    invested or lent, positive for money received. The result is the annual
    rate, in percent rounded to 6 significant digits, at which the cash flow
    discounted to its earliest date sums to zero.

    Raises:
        RateNotFoundError: The solver failed (zero or undefined derivative,
            no convergence, or divergence).
        ValueError: Duplicate dates, non-finite amounts or an unknown convention.
    """
    return solve_effective_rate(cash_flow, convention, settings=settings).rate
