"""Cash-flow data structures and normalisation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ytmlib.utils.date import DateLike, to_date
from ytmlib.utils.decimals import DECIMAL_CONTEXT, DecimalLike, ZERO, to_decimal

CashFlow = Dict[date, Decimal]


@dataclass(frozen=True)
class CashFlowEntry:
    """A single dated amount.

    Attributes:
        date: Payment date
        amount: Signed amount; negative for an outflow, positive for an inflow
    """

    date: date
    amount: Decimal

    @classmethod
    def of(cls, date_like: DateLike, amount: DecimalLike) -> "CashFlowEntry":
        return cls(to_date(date_like), to_decimal(amount))


@dataclass(frozen=True)
class CashFlowShape:
    """Summary of a cash flow used in diagnostics."""

    entry_count: int
    start_date: Optional[date]
    end_date: Optional[date]

    @property
    def span_days(self) -> int:
        if self.start_date is None or self.end_date is None:
            return 0
        return (self.end_date - self.start_date).days


def normalize_cash_flow(cash_flow: Optional[Mapping[DateLike, DecimalLike]]) -> CashFlow:
    """Return a ``{date: Decimal}`` copy of a date-like to number-like mapping.

    Raises ValueError when two keys resolve to the same date; amounts for one
    date must be aggregated by the caller (see ``aggregate_cash_flow``).
    """
    if cash_flow is None:
        return {}
    normalized: CashFlow = {}
    for key, amount in cash_flow.items():
        day = to_date(key)
        if day in normalized:
            raise ValueError(f"Duplicate cash flow date: {day.isoformat()}")
        normalized[day] = to_decimal(amount)
    return normalized


def aggregate_cash_flow(entries: Iterable[Tuple[DateLike, DecimalLike]]) -> CashFlow:
    """Build a cash flow from (date, amount) pairs, summing amounts per date."""
    aggregated: CashFlow = {}
    for key, amount in entries:
        day = to_date(key)
        aggregated[day] = DECIMAL_CONTEXT.add(aggregated.get(day, ZERO), to_decimal(amount))
    return aggregated


def cash_flow_shape(cash_flow: Optional[Mapping[DateLike, DecimalLike]]) -> CashFlowShape:
    """Entry count and date span of a cash flow."""
    normalized = normalize_cash_flow(cash_flow)
    if not normalized:
        return CashFlowShape(0, None, None)
    return CashFlowShape(len(normalized), min(normalized), max(normalized))
