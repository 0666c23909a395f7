"""Category and weekday breakdowns of transactions for chart consumption."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .data_processing import TransactionLike, transactions_frame
from .errors import ValidationError
from .models import TransactionType, parse_enum

WEEKDAYS = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


def _filtered_frame(
    transactions: Iterable[TransactionLike],
    filter_type: Optional[Union[str, TransactionType]],
) -> pd.DataFrame:
    frame = transactions_frame(transactions)
    if filter_type is not None:
        kind = parse_enum(TransactionType, filter_type)
        frame = frame[frame['type'] == kind.value]
    return frame


def group_by_category(
    transactions: Iterable[TransactionLike],
    filter_type: Optional[Union[str, TransactionType]] = None,
) -> Dict[str, float]:
    """Sum amounts per category.

    Args:
        transactions: Transaction records or row dictionaries
        filter_type: ``'income'``/``'expense'`` to restrict the rows, ``None`` for all

    Returns:
        Mapping of category name to summed amount, in first-encounter order.
        Missing or blank categories are reported as ``Uncategorized`` and
        categories that sum to zero are left out.

    Example:
        >>> group_by_category([{'amount': 5, 'category': 'Food', 'type': 'expense'}], 'expense')
        {'Food': 5.0}
    """
    frame = _filtered_frame(transactions, filter_type)
    if frame.empty:
        return {}
    totals = frame.groupby('category', sort=False)['amount'].sum()
    totals = totals[totals != 0]
    return {str(name): float(value) for name, value in totals.items()}


def category_chart_data(grouped: Dict[str, float], sort_by: Optional[str] = None) -> List[Dict[str, object]]:
    """Convert a category mapping into ``[{'name', 'value'}]`` chart rows.

    ``sort_by='value'`` orders largest first, ``sort_by='name'`` alphabetically.
    Ties keep the mapping's order.
    """
    rows = [{'name': name, 'value': value} for name, value in grouped.items() if value]
    if sort_by is None:
        return rows
    if sort_by == 'value':
        return sorted(rows, key=lambda row: -row['value'])
    if sort_by == 'name':
        return sorted(rows, key=lambda row: row['name'])
    raise ValidationError(f"sort_by must be 'value', 'name' or None, got {sort_by!r}")


def top_categories(transactions: Iterable[TransactionLike], limit: int = 5) -> List[Dict[str, object]]:
    """The ``limit`` largest expense categories, largest first."""
    grouped = group_by_category(transactions, TransactionType.EXPENSE)
    return category_chart_data(grouped, sort_by='value')[:limit]


def category_percentages(grouped: Dict[str, float]) -> Dict[str, float]:
    """Each category's share of the total, in percent."""
    total = sum(grouped.values())
    if total <= 0:
        return {}
    return {name: value / total * 100 for name, value in grouped.items()}


def spending_by_weekday(transactions: Iterable[TransactionLike]) -> List[Dict[str, object]]:
    """Expense totals per weekday, Sunday first; every weekday is present."""
    frame = _filtered_frame(transactions, TransactionType.EXPENSE)
    frame = frame[frame['date'].notna()]
    totals = {day: 0.0 for day in WEEKDAYS}
    if not frame.empty:
        # pandas counts Monday as 0
        names = frame['date'].dt.dayofweek.map(lambda d: WEEKDAYS[(d + 1) % 7])
        for day, value in frame.groupby(names)['amount'].sum().items():
            totals[day] = float(value)
    return [{'day': day, 'amount': amount} for day, amount in totals.items()]
