import logging
from datetime import date
from decimal import Decimal

import pytest

from ytmlib import (
    STRICT_SETTINGS,
    DayCountConvention,
    RateNotFoundError,
    SolverSettings,
    effective_rate,
    installment_schedule,
    present_value,
    solve_effective_rate,
)
from ytmlib.utils.rootfinding import RootFindingError


@pytest.mark.parametrize("cash_flow", [None, {}])
def test_empty_cash_flow_yields_zero(cash_flow):
    rate = effective_rate(cash_flow)
    assert isinstance(rate, Decimal)
    assert rate == 0


def test_simple_annual_cash_flow():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2022, 1, 1): Decimal("120000")}
    assert effective_rate(flows) == Decimal("20.0")


def test_simple_six_months_cash_flow():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2021, 7, 1): Decimal("110000")}
    assert effective_rate(flows) == Decimal("21.1913")


def test_60_months_loan():
    flows = installment_schedule("2000000", "39602.39", 60, date(2020, 1, 1))
    assert effective_rate(flows) == Decimal("7.22607")


def test_120_months_loan():
    flows = installment_schedule("300000", "4304.12", 120, date(2020, 1, 1))
    assert effective_rate(flows) == Decimal("12.6757")


def test_rate_is_rounded_to_six_significant_digits():
    flows = installment_schedule("2000000", "39602.39", 60, date(2020, 1, 1))
    rate = effective_rate(flows)
    assert len(rate.as_tuple().digits) == 6


@pytest.mark.parametrize(
    "outflow, inflow, end",
    [
        (Decimal("-1000"), Decimal("1100"), date(2021, 1, 1)),
        (Decimal("-1000"), Decimal("1500"), date(2023, 6, 30)),
        (Decimal("-250000"), Decimal("251000"), date(2020, 2, 15)),
        (Decimal("-1000"), Decimal("3000"), date(2030, 1, 1)),
    ],
)
def test_single_period_closed_form(outflow, inflow, end):
    start = date(2020, 1, 1)
    rate = effective_rate({start: outflow, end: inflow})
    years = (end - start).days / 365
    residual = float(outflow) + float(inflow) / (1 + float(rate) / 100) ** years
    assert residual == pytest.approx(0.0, abs=abs(float(outflow)) * 1e-5)


def test_round_trip_with_present_value():
    flows = installment_schedule("2000000", "39602.39", 60, date(2020, 1, 1))
    result = solve_effective_rate(flows)
    assert abs(present_value(flows, result.root)) < Decimal("1E-8")
    assert float(present_value(flows, result.rate / 100)) == pytest.approx(0.0, abs=5.0)


def test_solve_effective_rate_diagnostics():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2022, 1, 1): Decimal("120000")}
    result = solve_effective_rate(flows)
    assert result.rate == Decimal("20")
    assert abs(result.root - Decimal("0.2")) < Decimal("1E-12")
    assert result.convention is DayCountConvention.ACTUAL_365
    assert result.history[0] == 0
    assert result.iterations == len(result.history)


def test_thirty_360_convention():
    flows = {date(2020, 1, 31): Decimal("-100"), date(2020, 7, 1): Decimal("110")}
    assert effective_rate(flows, DayCountConvention.THIRTY_360) == Decimal("21")
    assert effective_rate(flows, "30/360") == Decimal("21")


def test_convention_by_alias():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2022, 1, 1): Decimal("120000")}
    assert effective_rate(flows, "ACT/365F") == Decimal("20")


def test_strict_settings():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2022, 1, 1): Decimal("120000")}
    assert effective_rate(flows, settings=STRICT_SETTINGS) == Decimal("20")


def test_reporting_digits_setting():
    flows = {date(2021, 1, 1): Decimal("-100000"), date(2021, 7, 1): Decimal("110000")}
    assert effective_rate(flows, settings=SolverSettings(reporting_digits=3)) == Decimal("21.2")


def test_insertion_order_does_not_matter():
    flows = installment_schedule("300000", "4304.12", 120, date(2020, 1, 1))
    reordered = dict(reversed(list(flows.items())))
    assert effective_rate(reordered) == effective_rate(flows)


@pytest.mark.parametrize(
    "flows",
    [
        {date(2020, 1, 1): Decimal("100"), date(2021, 1, 1): Decimal("200")},
        {date(2020, 1, 1): Decimal("-100"), date(2021, 1, 1): Decimal("-200")},
        {date(2020, 1, 1): Decimal("100")},
        {date(2020, 1, 1): Decimal("0"), date(2021, 1, 1): Decimal("0")},
    ],
)
def test_one_sided_cash_flow_has_no_rate(flows):
    with pytest.raises(RateNotFoundError) as excinfo:
        effective_rate(flows)
    error = excinfo.value
    assert error.kind in {"undefined-derivative", "non-convergence", "divergence"}
    assert error.entry_count == len(flows)
    assert error.start_date == date(2020, 1, 1)
    assert isinstance(error.__cause__, RootFindingError)


def test_single_entry_has_undefined_derivative():
    with pytest.raises(RateNotFoundError) as excinfo:
        effective_rate({"2020-01-01": "-500"})
    assert excinfo.value.kind == "undefined-derivative"
    assert "1 entries" in str(excinfo.value)
    assert "0 days" in str(excinfo.value)
    assert "2020-01-01 to 2020-01-01" in str(excinfo.value)


def test_failure_is_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="ytmlib.rate.calculator"):
        with pytest.raises(RateNotFoundError):
            effective_rate({date(2020, 1, 1): Decimal("100"), date(2021, 1, 1): Decimal("200")})
    assert "Rate not found" in caplog.text


def test_duplicate_dates_are_rejected():
    with pytest.raises(ValueError, match="Duplicate cash flow date"):
        effective_rate({"2020-01-01": "-100", date(2020, 1, 1): "110"})


def test_unknown_convention_is_rejected():
    with pytest.raises(ValueError):
        effective_rate({date(2020, 1, 1): Decimal("-100")}, "ACT/ACT")


def test_two_sign_changes_select_the_lower_root():
    # NPV is zero at both 10% and 20%; the search climbs from 0 to the lower one.
    flows = {
        date(2021, 1, 1): Decimal("-100"),
        date(2022, 1, 1): Decimal("230"),
        date(2023, 1, 1): Decimal("-132"),
    }
    result = solve_effective_rate(flows)
    assert result.rate == Decimal("10.0000")
    assert result.history[0] == 0
    assert all(a < b for a, b in zip(result.history, result.history[1:]))
    assert all(value < Decimal("0.1") for value in result.history)
    assert effective_rate(flows) == Decimal("10")


def test_failure_message_reports_the_span():
    flows = {date(2020, 1, 1): Decimal("100"), date(2021, 1, 1): Decimal("200")}
    with pytest.raises(RateNotFoundError) as excinfo:
        effective_rate(flows)
    assert "2 entries (2020-01-01 to 2021-01-01, 366 days, ACT/365)" in str(excinfo.value)
    assert excinfo.value.shape.span_days == 366
