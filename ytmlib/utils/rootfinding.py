"""Root-finding utilities (Newton-Raphson over Decimal arithmetic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List, Optional

import logging

from ytmlib.config import DEFAULT_SETTINGS
from ytmlib.utils.decimals import DECIMAL_CONTEXT, ZERO, divide, to_decimal

logger = logging.getLogger(__name__)

Func = Callable[[Decimal], Decimal]


@dataclass
class RootResult:
    root: Decimal
    iterations: int
    history: List[Decimal] = field(default_factory=list)


class RootFindingError(RuntimeError):
    """Raised when root-finding fails to produce a root."""

    kind = "failure"

    def __init__(
        self, message: str, *, iterations: int = 0, last_value: Optional[Decimal] = None
    ) -> None:
        super().__init__(message)
        self.iterations = iterations
        self.last_value = last_value


class UndefinedDerivativeError(RootFindingError):
    """The function has no usable slope (zero or undefined) at a trial point."""

    kind = "undefined-derivative"


class NonConvergenceError(RootFindingError):
    """The iteration ceiling was reached before the tolerance was met."""

    kind = "non-convergence"


class DivergenceError(RootFindingError):
    """The trial value left the admissible range."""

    kind = "divergence"


def _evaluate(func: Func, x: Decimal, label: str, iterations: int) -> Decimal:
    try:
        return func(x)
    except (ArithmeticError, ValueError) as exc:
        logger.debug("%s undefined at x=%s: %s", label, x, exc)
        raise UndefinedDerivativeError(
            f"{label} is undefined at x={x}: {exc}",
            iterations=iterations,
            last_value=x,
        ) from exc


def newton_raphson(
    func: Func,
    deriv: Func,
    *,
    initial_guess: Decimal = ZERO,
    tolerance: Decimal = DEFAULT_SETTINGS.tolerance,
    max_iterations: int = DEFAULT_SETTINGS.max_iterations,
    max_range: Decimal = DEFAULT_SETTINGS.max_range,
    scale: int = DEFAULT_SETTINGS.scale,
) -> RootResult:
    """Newton-Raphson root finder on Decimal values.

    Each iteration samples the derivative at the current trial value and only
    then clamps a negative trial value to zero: the step is taken from the
    clamped value with the unclamped slope. Convergence is checked on the
    stepped value before any clamp.

    Parameters
    ----------
    func:
        Scalar function whose root is searched.
    deriv:
        Derivative of ``func``.
    initial_guess:
        Starting trial value.
    tolerance:
        Absolute tolerance on ``|func(x)|``.
    max_iterations:
        Iteration ceiling before ``NonConvergenceError``.
    max_range:
        Largest admissible trial value before ``DivergenceError``.
    scale:
        Fractional digits of the step division.

    Raises
    ------
    UndefinedDerivativeError
        The derivative is exactly zero, or either function cannot be
        evaluated, at a trial value.
    NonConvergenceError
        ``max_iterations`` exceeded.
    DivergenceError
        The trial value exceeded ``max_range``.
    """
    x = to_decimal(initial_guess)
    tolerance = to_decimal(tolerance)
    max_range = to_decimal(max_range)
    iterations = 0
    history: List[Decimal] = []
    value: Optional[Decimal] = None

    while True:
        history.append(x)

        slope = _evaluate(deriv, x, "derivative", iterations)
        if slope == ZERO:
            logger.debug("Zero derivative; aborting Newton at iter %s", iterations)
            raise UndefinedDerivativeError(
                f"Derivative is zero at x={x}", iterations=iterations, last_value=x
            )
        if x < ZERO:
            x = ZERO
            value = None
        if iterations > max_iterations:
            raise NonConvergenceError(
                f"Newton failed to converge within {max_iterations} iterations",
                iterations=iterations,
                last_value=x,
            )
        iterations += 1
        if x > max_range:
            raise DivergenceError(
                f"Newton diverged: x={x:.6E} exceeds {max_range:.0E}",
                iterations=iterations,
                last_value=x,
            )

        if value is None:
            value = _evaluate(func, x, "function", iterations)
        logger.debug("Newton iter %s: x=%s value=%s deriv=%s", iterations, x, value, slope)
        x = DECIMAL_CONTEXT.subtract(x, divide(value, slope, scale))

        value = _evaluate(func, x, "function", iterations)
        if DECIMAL_CONTEXT.abs(value) < tolerance:
            break

    logger.info("Found zero for the value of %s after %s iterations", x, iterations)
    logger.debug("Iterations: %s", history)
    return RootResult(x, iterations, history)
