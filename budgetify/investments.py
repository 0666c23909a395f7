"""Portfolio totals, allocation breakdowns and growth projection.

The projection assumes a constant, value-weighted annual return and
compounds it monthly; it is an illustration for the dashboard, not a
forecast model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from .config import get_setting
from .data_processing import InvestmentLike, investments_frame
from .formatting import safe_percent

logger = logging.getLogger(__name__)

PROJECTION_MONTHS = 24


def _js_round(value: float) -> int:
    # Half-up to the nearest integer, unlike Python's round()
    return int(np.floor(value + 0.5))


def weighted_return_rate(current_value: float, holdings: Iterable[InvestmentLike]) -> float:
    """Annual return rate (percent) weighted by each holding's share of ``current_value``.

    Falls back to the configured default rate (10%) when there are no
    holdings or the portfolio has no value.
    """
    default_rate = float(get_setting('projection', 'default_annual_rate', default=10))
    frame = investments_frame(holdings)
    if frame.empty or current_value <= 0:
        return default_rate
    weights = frame['value'].to_numpy() / current_value
    return float(np.sum(frame['return_rate'].to_numpy() * weights))


def project_growth(
    current_value: float,
    holdings: Iterable[InvestmentLike],
    fallback_annual_income: Optional[float] = None,
    start: Optional[Union[str, date, datetime, pd.Timestamp]] = None,
) -> List[Dict[str, object]]:
    """Project portfolio value month by month with compound growth.

    Args:
        current_value: Current total portfolio value
        holdings: Holdings used to weight the annual return rate
        fallback_annual_income: When the portfolio is empty, a fraction of
            this (10% by default) is used as a hypothetical starting value
        start: First projected month; defaults to the current month

    Returns:
        A list of ``{'date': 'MMM yyyy', 'value': int}`` points, one per
        month (always 24).  Each month compounds the previous month's
        projected value.
    """
    holdings = list(holdings or [])
    fraction = float(get_setting('projection', 'starting_income_fraction', default=0.10))

    value = float(current_value or 0.0)
    if value == 0 and fallback_annual_income:
        value = float(fallback_annual_income) * fraction

    annual_rate = weighted_return_rate(float(current_value or 0.0), holdings)
    monthly_rate = annual_rate / 12 / 100
    logger.debug("Projecting %s at %.4f%% per year over %d months", value, annual_rate, PROJECTION_MONTHS)

    first = pd.Period(pd.Timestamp(start) if start is not None else pd.Timestamp.now(), freq='M')
    points = []
    for offset in range(PROJECTION_MONTHS):
        value = value * (1 + monthly_rate)
        points.append({
            'date': (first + offset).strftime('%b %Y'),
            'value': _js_round(value),
        })
    return points


@dataclass(frozen=True)
class PortfolioSummary:
    total_value: float
    total_initial_value: float
    total_gain: float
    total_return_percent: float
    projected_value: float


def portfolio_summary(
    holdings: Iterable[InvestmentLike],
    fallback_annual_income: Optional[float] = None,
) -> PortfolioSummary:
    """Totals for the summary cards; the projected value is the last projection point."""
    holdings = list(holdings or [])
    frame = investments_frame(holdings)
    total_value = float(frame['value'].sum())
    total_initial = float(frame['initial_value'].sum())
    gain = total_value - total_initial
    projection = project_growth(total_value, holdings, fallback_annual_income)
    return PortfolioSummary(
        total_value=total_value,
        total_initial_value=total_initial,
        total_gain=gain,
        total_return_percent=safe_percent(gain, total_initial),
        projected_value=float(projection[-1]['value']) if projection else 0.0,
    )


def portfolio_composition(holdings: Iterable[InvestmentLike]) -> List[Dict[str, object]]:
    """One ``{'name', 'value'}`` row per holding."""
    frame = investments_frame(holdings)
    return [{'name': row.name, 'value': float(row.value)} for row in frame.itertuples(index=False)]


def allocation_by_type(holdings: Iterable[InvestmentLike]) -> List[Dict[str, object]]:
    """Holding values summed per investment type, in first-encounter order."""
    frame = investments_frame(holdings)
    if frame.empty:
        return []
    totals = frame.groupby('type', sort=False)['value'].sum()
    return [{'name': str(name), 'value': float(value)} for name, value in totals.items()]


def allocation_deviation(current: Dict[str, float], target: Dict[str, float]) -> float:
    """Total deviation between two percentage allocations.

    Every over-allocated point is matched by an under-allocated one, so the
    sum of absolute differences is halved.
    """
    keys = list(dict.fromkeys([*current, *target]))
    diffs = np.array([current.get(k, 0.0) - target.get(k, 0.0) for k in keys], dtype=float)
    return float(np.abs(diffs).sum() / 2)


def investment_recommendations(available_funds: float) -> List[Dict[str, object]]:
    """Split monthly investable funds across instruments by priority.

    Emergency fund first (30%, capped at three months of expenses), then a
    SIP (40% of the rest, capped at 25,000), blue-chip stocks (50% of the
    rest, capped at 50,000) and whatever remains into a fixed deposit.
    """
    if available_funds <= 0:
        return []

    monthly_expenses = float(get_setting('recommendations', 'estimated_monthly_expenses', default=40000))
    minimum = float(get_setting('recommendations', 'minimum_allocation', default=5000))

    def _row(name, description, allocation, risk, returns, instrument, priority):
        return {
            'name': name,
            'description': description,
            'allocation': allocation,
            'percentage': _js_round(allocation / available_funds * 100),
            'riskLevel': risk,
            'returnRate': returns,
            'instrument': instrument,
            'priority': priority,
        }

    recommendations = []
    remaining = available_funds

    emergency = min(remaining * 0.3, monthly_expenses * 3)
    if emergency >= minimum:
        recommendations.append(_row(
            'Emergency Fund', 'High-liquidity savings for unexpected expenses', emergency,
            'Very Low', '4-6%', 'High-yield Savings Account', 'High',
        ))
        remaining -= emergency

    if remaining >= minimum:
        sip = min(remaining * 0.4, 25000)
        recommendations.append(_row(
            'SIP Investment', 'Systematic Investment Plan in equity mutual funds', sip,
            'Medium', '10-14%', 'Equity mid-cap mutual fund', 'Medium',
        ))
        remaining -= sip

    if remaining >= 10000:
        stocks = min(remaining * 0.5, 50000)
        recommendations.append(_row(
            'Blue-chip Stocks', 'Diversified portfolio of established companies', stocks,
            'Medium-High', '12-18%', 'Large-cap equities', 'Medium',
        ))
        remaining -= stocks

    if remaining >= 1000:
        recommendations.append(_row(
            'Fixed Deposit', 'Fixed term deposit with guaranteed returns', remaining,
            'Low', '5-7%', 'One-year bank fixed deposit', 'Low',
        ))

    return recommendations
