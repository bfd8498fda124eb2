"""
Cash flows from pandas containers.

Rows sharing a date are summed by default; pass ``aggregate=False`` to reject
them instead.
"""

from typing import Iterable, Tuple

import pandas as pd

from ytmlib.utils.date import to_date
from ytmlib.utils.decimals import to_decimal

from .types import CashFlow, aggregate_cash_flow


def _collect(pairs: Iterable[Tuple[object, object]], aggregate: bool) -> CashFlow:
    if aggregate:
        return aggregate_cash_flow(pairs)
    flows: CashFlow = {}
    for key, amount in pairs:
        day = to_date(key)
        if day in flows:
            raise ValueError(f"Duplicate cash flow date: {day.isoformat()}")
        flows[day] = to_decimal(amount)
    return flows


def cash_flow_from_frame(
    frame: pd.DataFrame,
    date_column: str = "date",
    amount_column: str = "amount",
    aggregate: bool = True,
) -> CashFlow:
    """
    Build a cash flow from two columns of a DataFrame.

    Args:
        frame: Source rows, one payment per row
        date_column: Column holding payment dates
        amount_column: Column holding signed amounts
        aggregate: Sum amounts sharing a date (default) instead of raising

    Returns:
        ``{date: Decimal}`` cash flow
    """
    missing = [col for col in (date_column, amount_column) if col not in frame.columns]
    if missing:
        raise ValueError(f"Missing cash flow columns: {missing}")

    subset = frame[[date_column, amount_column]]
    if subset.isna().any().any():
        raise ValueError("Cash flow columns must not contain missing values")

    return _collect(zip(subset[date_column], subset[amount_column]), aggregate)


def cash_flow_from_series(series: pd.Series, aggregate: bool = True) -> CashFlow:
    """
    Build a cash flow from a Series indexed by payment date.
    """
    if series.isna().any():
        raise ValueError("Cash flow amounts must not contain missing values")
    return _collect(series.items(), aggregate)
