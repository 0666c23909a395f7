"""Income/expense summaries over transaction lists.

Income basis
------------
There is a single income basis throughout this module: the *stated*
income (a figure the user declared on their profile) is **added** to the
income derived from ``income`` transactions.  Callers that only want
transaction-derived figures leave ``stated_income`` at its default of
zero.  The savings rate is always computed against that combined income.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .data_processing import TransactionLike, transactions_frame
from .formatting import safe_percent
from .models import BudgetEntry, TransactionType

logger = logging.getLogger(__name__)

DateLike = Union[str, date, datetime, pd.Timestamp]


@dataclass(frozen=True)
class Summary:
    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0
    savings_rate: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'income': self.income,
            'expenses': self.expenses,
            'balance': self.balance,
            'savingsRate': self.savings_rate,
        }


def _type_total(frame: pd.DataFrame, kind: TransactionType) -> float:
    if frame.empty:
        return 0.0
    return float(frame.loc[frame['type'] == kind.value, 'amount'].sum())


def calculate_summary(transactions: Iterable[TransactionLike], stated_income: float = 0.0) -> Summary:
    """Reduce transactions into income, expenses, balance and savings rate.

    Args:
        transactions: Transaction records or row dictionaries
        stated_income: Declared income added on top of income transactions

    Returns:
        A :class:`Summary`; all zeros for an empty list with no stated income.

    Example:
        >>> calculate_summary([{'amount': 100, 'type': 'income'}]).savings_rate
        100.0
    """
    frame = transactions_frame(transactions)
    income = float(stated_income or 0.0) + _type_total(frame, TransactionType.INCOME)
    expenses = _type_total(frame, TransactionType.EXPENSE)
    balance = income - expenses
    savings_rate = safe_percent(balance, income) if income > 0 else 0.0
    logger.debug("Summary over %d transactions: income=%s expenses=%s", len(frame), income, expenses)
    return Summary(income=income, expenses=expenses, balance=balance, savings_rate=savings_rate)


def _as_timestamp(value: Optional[DateLike]) -> Optional[pd.Timestamp]:
    if value is None:
        return None
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)
    return ts


def _date_mask(frame: pd.DataFrame, start: Optional[DateLike], end: Optional[DateLike]) -> pd.Series:
    mask = frame['date'].notna()
    start_ts, end_ts = _as_timestamp(start), _as_timestamp(end)
    if start_ts is not None:
        mask &= frame['date'] >= start_ts
    if end_ts is not None:
        mask &= frame['date'] <= end_ts
    return mask


def filter_by_date_range(
    transactions: Iterable[TransactionLike],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> List[TransactionLike]:
    """Keep transactions dated within ``[start, end]`` (both inclusive).

    Rows with an unparseable date are dropped whenever a bound is given.
    """
    rows = list(transactions or [])
    if start is None and end is None:
        return rows
    frame = transactions_frame(rows)
    if frame.empty:
        return []
    mask = _date_mask(frame, start, end)
    return [row for row, keep in zip(rows, mask.tolist()) if keep]


def current_month_summary(
    transactions: Iterable[TransactionLike],
    stated_income: float = 0.0,
    today: Optional[DateLike] = None,
) -> Summary:
    """Summary restricted to transactions on or after the first of ``today``'s month."""
    reference = _as_timestamp(today) if today is not None else pd.Timestamp.now()
    month_start = reference.normalize().replace(day=1)
    return calculate_summary(filter_by_date_range(transactions, start=month_start), stated_income)


def monthly_breakdown(transactions: Iterable[TransactionLike]) -> List[Dict[str, object]]:
    """Income, expenses and savings per calendar month, oldest first.

    Each row is ``{'month': 'Jan 2024', 'income', 'expenses', 'savings'}``.
    Every month between the first and last transaction gets a row, with
    zeros where nothing was recorded.
    """
    frame = transactions_frame(transactions)
    frame = frame[frame['date'].notna()]
    if frame.empty:
        return []
    frame = frame.assign(period=frame['date'].dt.to_period('M'))
    pivot = (
        frame.pivot_table(index='period', columns='type', values='amount', aggfunc='sum', fill_value=0.0)
        .reindex(columns=[t.value for t in TransactionType], fill_value=0.0)
        .sort_index()
    )
    months = pd.period_range(pivot.index.min(), pivot.index.max(), freq='M')
    pivot = pivot.reindex(months, fill_value=0.0)
    rows = []
    for period, values in pivot.iterrows():
        income = float(values[TransactionType.INCOME.value])
        expenses = float(values[TransactionType.EXPENSE.value])
        rows.append({
            'month': period.strftime('%b %Y'),
            'income': income,
            'expenses': expenses,
            'savings': income - expenses,
        })
    return rows


def summarize_entries(entries: Iterable[BudgetEntry]) -> Dict[str, float]:
    """Totals for one budget sheet: ``{'income', 'expenses', 'balance'}``."""
    summary = calculate_summary(entries)
    return {
        'income': summary.income,
        'expenses': summary.expenses,
        'balance': summary.balance,
    }
