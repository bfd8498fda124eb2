"""Effective rate public API."""

from .calculator import RateNotFoundError, RateResult, effective_rate, solve_effective_rate

__all__ = [
    "RateNotFoundError",
    "RateResult",
    "effective_rate",
    "solve_effective_rate",
]
