"""Installment schedules for amortizing loans."""

from __future__ import annotations

from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta

from ytmlib.cashflow.types import CashFlow
from ytmlib.utils.date import DateLike, to_date
from ytmlib.utils.decimals import DECIMAL_CONTEXT, DecimalLike, to_decimal


def installment_dates(
    start: DateLike, count: int, months_between: int = 1
) -> List[date]:
    """Dates of ``count`` installments, the first one ``months_between`` after start.

    Each date is stepped from ``start``, not from the previous installment:
    a loan starting on Jan 31 pays on Feb 28 (29) and then on Mar 31.
    """
    if count < 0:
        raise ValueError("count must be non-negative")
    if months_between <= 0:
        raise ValueError("months_between must be positive")
    start_date = to_date(start)
    return [
        start_date + relativedelta(months=months_between * i)
        for i in range(1, count + 1)
    ]


def installment_schedule(
    principal: DecimalLike,
    installment: DecimalLike,
    count: int,
    start: DateLike,
    months_between: int = 1,
) -> CashFlow:
    """Loan cash flow: the disbursed principal followed by level installments.

    Args:
        principal: Amount lent at ``start`` (recorded as an outflow)
        installment: Amount of every repayment (recorded as an inflow)
        count: Number of installments
        start: Disbursement date
        months_between: Months between two installments (default: 1)

    Returns:
        ``{start: -principal, start + k*months_between months: installment}``
    """
    principal = to_decimal(principal)
    installment = to_decimal(installment)
    if principal <= 0:
        raise ValueError("principal must be positive")
    if installment <= 0:
        raise ValueError("installment must be positive")

    start_date = to_date(start)
    flows: CashFlow = {start_date: DECIMAL_CONTEXT.minus(principal)}
    for day in installment_dates(start_date, count, months_between):
        flows[day] = installment
    return flows
