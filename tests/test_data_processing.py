"""Unit tests for budgetify.data_processing.

These check the record-to-DataFrame normalisation the aggregation
modules rely on.
"""

from __future__ import annotations

import pandas as pd

from budgetify import data_processing as dp
from budgetify.models import BudgetEntry, Investment, TransactionType


def test_transactions_frame_columns_and_order() -> None:
    df = dp.transactions_frame([
        {'id': 'b', 'amount': '2.5', 'type': 'expense', 'category': 'Food', 'date': '2024-01-02'},
        {'id': 'a', 'amount': 10, 'type': 'income', 'category': ' ', 'date': '2024-01-01T08:00:00Z'},
    ])
    assert list(df.columns) == dp.TRANSACTION_COLUMNS
    assert list(df['id']) == ['b', 'a']
    assert list(df['category']) == ['Food', 'Uncategorized']
    assert df['amount'].dtype == float
    assert df.loc[1, 'date'] == pd.Timestamp('2024-01-01 08:00:00')


def test_bad_dates_become_nat() -> None:
    df = dp.transactions_frame([{'amount': 1, 'type': 'expense', 'date': 'yesterday'}])
    assert pd.isna(df.loc[0, 'date'])


def test_empty_frame_has_typed_columns() -> None:
    df = dp.transactions_frame([])
    assert df.empty
    assert list(df.columns) == dp.TRANSACTION_COLUMNS
    assert pd.api.types.is_datetime64_any_dtype(df['date'])


def test_budget_entries_are_accepted() -> None:
    entry = BudgetEntry('e', 's', TransactionType.EXPENSE, 'Rent', 900.0, '2024-02-01')
    df = dp.transactions_frame([entry])
    assert df.loc[0, 'type'] == 'expense'
    assert df.loc[0, 'description'] == ''


def test_investments_frame() -> None:
    df = dp.investments_frame([
        Investment('1', 'Fund', 100.0, 90.0, 8.0, 'Mutual Fund'),
        {'id': '2', 'name': 'Gold', 'value': '50', 'initialValue': 40, 'returnRate': 5, 'type': 'Commodity'},
    ])
    assert list(df['value']) == [100.0, 50.0]
    assert list(df['return_rate']) == [8.0, 5.0]
    assert dp.investments_frame([]).empty
