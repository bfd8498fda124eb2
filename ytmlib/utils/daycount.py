"""Day count conventions for cash-flow discounting."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from functools import partial
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Tuple, Union

from ytmlib.config import DAYS_IN_YEAR, MONTHS_IN_YEAR
from ytmlib.utils.decimals import divide

DayCountFunc = Callable[[date, date], Decimal]
UnitCountFunc = Callable[[date, date], int]


class DayCountConvention(Enum):
    """Supported day count conventions."""

    ACTUAL_365 = "ACT/365"
    THIRTY_360 = "30/360"

    @classmethod
    def from_name(cls, name: Union[str, "DayCountConvention"]) -> "DayCountConvention":
        """Resolve a convention from its name or one of its aliases."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().upper()
        try:
            return _ALIASES[key]
        except KeyError as exc:
            raise ValueError(
                f"Unknown day count convention: {name}. "
                f"Available: {list(_ALIASES.keys())}"
            ) from exc

    def __str__(self) -> str:
        return self.value


_ALIASES: Dict[str, DayCountConvention] = {
    "ACT/365": DayCountConvention.ACTUAL_365,
    "ACT/365F": DayCountConvention.ACTUAL_365,
    "ACTUAL/365": DayCountConvention.ACTUAL_365,
    "ACTUAL/365F": DayCountConvention.ACTUAL_365,
    "ACTUAL_365": DayCountConvention.ACTUAL_365,
    "30/360": DayCountConvention.THIRTY_360,
    "30E/360": DayCountConvention.THIRTY_360,
    "30/360E": DayCountConvention.THIRTY_360,
    "30U/360": DayCountConvention.THIRTY_360,
    "THIRTY_360": DayCountConvention.THIRTY_360,
}


def _actual_days(start: date, end: date) -> int:
    return (end - start).days


def _whole_months(start: date, end: date) -> int:
    # Day of month is ignored:2020-01-31 -> 2020-02-01 is one month.
    return (end.year - start.year) * MONTHS_IN_YEAR + (end.month - start.month)


# Read-only: convention -> (unit counter, units per year).
_REGISTRY: Mapping[DayCountConvention, Tuple[UnitCountFunc, int]] = MappingProxyType(
    {
        DayCountConvention.ACTUAL_365: (_actual_days, DAYS_IN_YEAR),
        DayCountConvention.THIRTY_360: (_whole_months, MONTHS_IN_YEAR),
    }
)


def day_count(
    start: date, end: date, convention: Union[str, DayCountConvention] = DayCountConvention.ACTUAL_365
) -> int:
    """Signed number of whole units (days or months) between two dates."""
    counter, _ = _REGISTRY[DayCountConvention.from_name(convention)]
    return counter(start, end)


def year_basis(convention: Union[str, DayCountConvention]) -> int:
    """Units per year for the convention (365 days or 12 months)."""
    _, basis = _REGISTRY[DayCountConvention.from_name(convention)]
    return basis


def time_fraction(
    start: date, end: date, convention: Union[str, DayCountConvention] = DayCountConvention.ACTUAL_365
) -> Decimal:
    """Return the year fraction from ``start`` to ``end``.

    Follows the conventions:
        ACT/365: yearfrac(d1, d2) = ActualDays(d1, d2) / 365
        30/360:  yearfrac(d1, d2) = CalendarMonths(d1, d2) / 12

    Zero when the dates coincide.
    """
    convention = DayCountConvention.from_name(convention)
    return divide(
        Decimal(day_count(start, end, convention)), Decimal(year_basis(convention))
    )


def get_day_count(name: Union[str, DayCountConvention]) -> DayCountFunc:
    """Return a callable implementing the requested day-count convention."""
    return partial(time_fraction, convention=DayCountConvention.from_name(name))
