from decimal import Decimal

import pytest

from ytmlib.utils.rootfinding import (
    DivergenceError,
    NonConvergenceError,
    RootFindingError,
    UndefinedDerivativeError,
    newton_raphson,
)


def test_linear_function_converges_in_one_step():
    result = newton_raphson(lambda x: 3 * x - Decimal("1.5"), lambda x: Decimal(3))
    assert result.root == Decimal("0.5")
    assert result.iterations == 1
    assert result.history == [Decimal(0)]


def test_square_root_from_initial_guess():
    result = newton_raphson(
        lambda x: x * x - 2,
        lambda x: 2 * x,
        initial_guess=Decimal(1),
    )
    assert abs(result.root - Decimal(2).sqrt()) < Decimal("1e-8")
    assert result.iterations == len(result.history)
    assert result.history[0] == Decimal(1)


def test_zero_derivative_fails():
    with pytest.raises(UndefinedDerivativeError) as excinfo:
        newton_raphson(lambda x: x * x - 2, lambda x: 2 * x)
    assert excinfo.value.kind == "undefined-derivative"
    assert excinfo.value.iterations == 0
    assert excinfo.value.last_value == 0


def test_negative_trial_values_are_clamped_before_stepping():
    # Slope is taken at the negative point, the step always restarts from zero,
    # so the search cycles between -1/6 and about -3.
    with pytest.raises(NonConvergenceError) as excinfo:
        newton_raphson(
            lambda x: x * x - 1,
            lambda x: 2 * x,
            initial_guess=Decimal(-3),
            max_iterations=20,
        )
    assert excinfo.value.kind == "non-convergence"
    assert excinfo.value.iterations > 20
    assert excinfo.value.last_value == 0


def test_root_found_at_unclamped_value():
    # Convergence is tested after the step, before any clamp.
    result = newton_raphson(lambda x: x + 1, lambda x: Decimal(1))
    assert result.root == Decimal(-1)


def test_divergence():
    with pytest.raises(DivergenceError) as excinfo:
        newton_raphson(
            lambda x: 1 / (1 + x),
            lambda x: -1 / ((1 + x) * (1 + x)),
            max_range=Decimal(1000),
        )
    assert excinfo.value.kind == "divergence"
    assert excinfo.value.last_value > 1000


def test_evaluation_error_is_reported_as_undefined_derivative():
    def deriv(x):
        raise ValueError("math domain error")

    with pytest.raises(UndefinedDerivativeError) as excinfo:
        newton_raphson(lambda x: x, deriv)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_failures_share_base_class():
    for error in (UndefinedDerivativeError, NonConvergenceError, DivergenceError):
        assert issubclass(error, RootFindingError)
        assert issubclass(error, RuntimeError)


def test_history_is_owned_by_each_solve():
    first = newton_raphson(lambda x: 2 * x - 1, lambda x: Decimal(2))
    second = newton_raphson(lambda x: 2 * x - 1, lambda x: Decimal(2))
    first.history.append(Decimal(99))
    assert second.history == [Decimal(0)]
