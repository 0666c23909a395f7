"""Conversion of record lists into pandas DataFrames.

The aggregation modules accept sequences of dataclass records or plain
row dictionaries.  Everything is normalised here into a DataFrame with a
fixed set of columns so the group-by code never has to care where the
rows came from.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

import pandas as pd

from .config import get_setting
from .models import BudgetEntry, Investment, Transaction

TRANSACTION_COLUMNS = ['id', 'amount', 'description', 'category', 'type', 'date']
INVESTMENT_COLUMNS = ['id', 'name', 'value', 'initial_value', 'return_rate', 'type', 'start_date']

TransactionLike = Union[Transaction, BudgetEntry, Mapping[str, Any]]
InvestmentLike = Union[Investment, Mapping[str, Any]]


def uncategorized_label() -> str:
    return get_setting('grouping', 'uncategorized_label', default='Uncategorized')


def coerce_transactions(rows: Iterable[TransactionLike]) -> List[Union[Transaction, BudgetEntry]]:
    """Return records unchanged and build :class:`Transaction` objects from dicts."""
    records: List[Union[Transaction, BudgetEntry]] = []
    for row in rows or []:
        if isinstance(row, (Transaction, BudgetEntry)):
            records.append(row)
        else:
            records.append(Transaction.from_record(row))
    return records


def coerce_investments(rows: Iterable[InvestmentLike]) -> List[Investment]:
    return [row if isinstance(row, Investment) else Investment.from_record(row) for row in rows or []]


def parse_dates(values: Any) -> pd.Series:
    """Parse ISO-8601 strings to naive UTC timestamps; unparseable values become NaT."""
    parsed = pd.to_datetime(pd.Series(values, dtype=object), errors='coerce', utc=True, format='ISO8601')
    return parsed.dt.tz_localize(None)


def transactions_frame(rows: Iterable[TransactionLike]) -> pd.DataFrame:
    """Build a DataFrame with one row per transaction.

    Columns: ``id``, ``amount`` (float), ``description``, ``category``
    (blank values replaced with the uncategorized label), ``type`` (the
    enum's string value) and ``date`` (datetime64, NaT when unparseable).
    Row order follows the input order.
    """
    records = coerce_transactions(rows)
    if not records:
        frame = pd.DataFrame(columns=TRANSACTION_COLUMNS)
        frame['amount'] = frame['amount'].astype(float)
        frame['date'] = pd.to_datetime(frame['date'])
        return frame

    label = uncategorized_label()
    data = pd.DataFrame(
        {
            'id': [r.id for r in records],
            'amount': [float(r.amount) for r in records],
            'description': [r.description or '' for r in records],
            'category': [(r.category or '').strip() or label for r in records],
            'type': [r.type.value for r in records],
            'date': [r.date for r in records],
        },
        columns=TRANSACTION_COLUMNS,
    )
    data['date'] = parse_dates(data['date'])
    return data


def investments_frame(rows: Iterable[InvestmentLike]) -> pd.DataFrame:
    """Build a DataFrame with one row per holding, in input order."""
    records = coerce_investments(rows)
    frame = pd.DataFrame([r.to_record() for r in records], columns=INVESTMENT_COLUMNS)
    for column in ('value', 'initial_value', 'return_rate'):
        frame[column] = frame[column].astype(float)
    return frame
