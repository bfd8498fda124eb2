"""Effective rate (APR / IRR / YTM) calculation for dated cash flows.

Key modules:
- rate: effective rate solver entry point
- cashflow: cash-flow normalisation, schedules and present value
- utils.daycount: ACT/365 and 30/360 year fractions
- utils.rootfinding: Newton-Raphson on Decimal values
"""

from .cashflow import (
    CashFlowEntry,
    installment_schedule,
    present_value,
    present_value_derivative,
)
from .config import DEFAULT_SETTINGS, STRICT_SETTINGS, SolverSettings
from .rate import RateNotFoundError, RateResult, effective_rate, solve_effective_rate
from .utils.daycount import DayCountConvention, time_fraction
from .utils.rootfinding import (
    DivergenceError,
    NonConvergenceError,
    RootFindingError,
    UndefinedDerivativeError,
    newton_raphson,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Main functions
    "effective_rate",
    "solve_effective_rate",
    "present_value",
    "present_value_derivative",
    "time_fraction",
    "newton_raphson",
    "installment_schedule",
    # Types
    "CashFlowEntry",
    "DayCountConvention",
    "RateResult",
    "SolverSettings",
    "DEFAULT_SETTINGS",
    "STRICT_SETTINGS",
    # Exceptions
    "RateNotFoundError",
    "RootFindingError",
    "UndefinedDerivativeError",
    "NonConvergenceError",
    "DivergenceError",
]
