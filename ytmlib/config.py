"""Library-wide constants and solver settings."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

DAYS_IN_YEAR = 365
MONTHS_IN_YEAR = 12

# Significant digits kept by the decimal context used for valuation.
DECIMAL_PRECISION = 50
# Fractional digits kept by every decimal division.
DECIMAL_SCALE = 20


@dataclass(frozen=True)
class SolverSettings:
    """Constants driving one effective-rate solve.

    Attributes:
        max_iterations: Newton iterations allowed before giving up
        tolerance: Absolute present-value tolerance, in currency units
        max_range: Largest trial rate (decimal, not percent) before the search
            is declared divergent
        scale: Fractional digits of the Newton step division
        reporting_digits: Significant digits of the reported percentage
    """

    max_iterations: int = 500
    tolerance: Decimal = Decimal("1E-8")
    max_range: Decimal = Decimal(10) ** 200
    scale: int = DECIMAL_SCALE
    reporting_digits: int = 6

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_range <= 0:
            raise ValueError("max_range must be positive")
        if self.scale < 0:
            raise ValueError("scale must be non-negative")
        if self.reporting_digits <= 0:
            raise ValueError("reporting_digits must be positive")


DEFAULT_SETTINGS = SolverSettings()

# Tighter tolerance with a smaller admissible range; same iteration ceiling.
STRICT_SETTINGS = SolverSettings(
    tolerance=Decimal("1E-10"),
    max_range=Decimal(10) ** 100,
)
