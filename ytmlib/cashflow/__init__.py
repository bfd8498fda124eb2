"""Cash-flow construction and valuation public API."""

from .loaders import cash_flow_from_frame, cash_flow_from_series
from .schedule import installment_dates, installment_schedule
from .types import (
    CashFlow,
    CashFlowEntry,
    CashFlowShape,
    aggregate_cash_flow,
    cash_flow_shape,
    normalize_cash_flow,
)
from .valuation import (
    discount_amount,
    present_value,
    present_value_derivative,
    time_fractions,
    valuation_start_date,
)

__all__ = [
    # Types
    "CashFlow",
    "CashFlowEntry",
    "CashFlowShape",
    # Construction
    "normalize_cash_flow",
    "aggregate_cash_flow",
    "cash_flow_shape",
    "cash_flow_from_frame",
    "cash_flow_from_series",
    "installment_dates",
    "installment_schedule",
    # Valuation
    "present_value",
    "present_value_derivative",
    "discount_amount",
    "time_fractions",
    "valuation_start_date",
]
