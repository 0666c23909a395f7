"""Tests for budgetify.investments."""

from __future__ import annotations

import pytest

from budgetify import config
from budgetify.investments import (
    PROJECTION_MONTHS,
    allocation_by_type,
    allocation_deviation,
    investment_recommendations,
    portfolio_composition,
    portfolio_summary,
    project_growth,
    weighted_return_rate,
)
from budgetify.models import Investment


def holdings():
    return [
        Investment('1', 'Index Fund', 6000.0, 5000.0, 12.0, 'Mutual Fund', '2023-01-01'),
        {'id': '2', 'name': 'Bond', 'value': 4000, 'initialValue': 4000, 'returnRate': 7, 'type': 'Bonds'},
    ]


def test_projection_seeded_from_income() -> None:
    points = project_growth(0, [], 1_200_000, start='2024-01-15')
    assert len(points) == 24
    assert points[0] == {'date': 'Jan 2024', 'value': 121000}
    assert points[-1]['date'] == 'Dec 2025'
    values = [p['value'] for p in points]
    assert all(b > a for a, b in zip(values, values[1:]))


def test_projection_compounds_previous_value() -> None:
    points = project_growth(1000, [], start='2024-06-01')
    expected = 1000 * (1 + 10 / 12 / 100) ** 24
    assert points[-1]['value'] == round(expected)


def test_projection_is_deterministic() -> None:
    first = project_growth(10000, holdings(), start='2025-02-01')
    second = project_growth(10000, holdings(), start='2025-02-01')
    assert first == second


def test_projection_without_value_or_income_stays_zero() -> None:
    points = project_growth(0, [], start='2024-01-01')
    assert len(points) == 24
    assert {p['value'] for p in points} == {0}


def test_projection_length_ignores_settings(monkeypatch) -> None:
    monkeypatch.setattr(config, 'load_settings', lambda path=None: {'projection': {'months': 6}})
    assert len(project_growth(500, [], start='2024-01-01')) == PROJECTION_MONTHS == 24


def test_projection_month_labels_wrap_year() -> None:
    points = project_growth(100, [], start='2024-11-30')
    assert [p['date'] for p in points[:3]] == ['Nov 2024', 'Dec 2024', 'Jan 2025']


def test_weighted_return_rate() -> None:
    assert weighted_return_rate(10000, holdings()) == pytest.approx(6000 / 10000 * 12 + 4000 / 10000 * 7)


def test_weighted_return_rate_defaults_without_holdings() -> None:
    assert weighted_return_rate(5000, []) == 10.0
    assert weighted_return_rate(0, holdings()) == 10.0


def test_portfolio_summary_totals() -> None:
    result = portfolio_summary(holdings())
    assert result.total_value == 10000
    assert result.total_initial_value == 9000
    assert result.total_gain == 1000
    assert result.total_return_percent == pytest.approx(1000 / 9000 * 100)
    assert result.projected_value > result.total_value


def test_portfolio_summary_empty() -> None:
    result = portfolio_summary([])
    assert result.total_value == 0
    assert result.total_return_percent == 0.0
    assert result.projected_value == 0


def test_gain_percent_guards_zero_initial_value() -> None:
    gift = Investment('g', 'Gifted shares', 500.0, 0.0, 8.0, 'Stocks')
    assert gift.gain == 500.0
    assert gift.gain_percent is None
    assert portfolio_summary([gift]).total_return_percent == 0.0


def test_composition_and_allocation() -> None:
    rows = holdings() + [Investment('3', 'Second Fund', 1000.0, 900.0, 11.0, 'Mutual Fund')]
    assert portfolio_composition(rows)[0] == {'name': 'Index Fund', 'value': 6000.0}
    assert allocation_by_type(rows) == [
        {'name': 'Mutual Fund', 'value': 7000.0},
        {'name': 'Bonds', 'value': 4000.0},
    ]
    assert allocation_by_type([]) == []


def test_allocation_deviation() -> None:
    current = {'Stocks': 60, 'Bonds': 20, 'Cash': 15, 'Alternative': 5}
    target = {'Stocks': 55, 'Bonds': 25, 'Cash': 10, 'Alternative': 10}
    assert allocation_deviation(current, target) == pytest.approx(10.0)
    assert allocation_deviation(current, current) == 0.0


def test_recommendations_tiers() -> None:
    recs = investment_recommendations(100000)
    names = [r['name'] for r in recs]
    assert names == ['Emergency Fund', 'SIP Investment', 'Blue-chip Stocks', 'Fixed Deposit']
    assert recs[0]['allocation'] == 30000
    assert recs[1]['allocation'] == 25000
    assert recs[2]['allocation'] == 22500
    assert recs[3]['allocation'] == 22500
    assert sum(r['allocation'] for r in recs) == pytest.approx(100000)


def test_recommendations_small_or_empty_funds() -> None:
    assert investment_recommendations(0) == []
    recs = investment_recommendations(3000)
    assert [r['name'] for r in recs] == ['Fixed Deposit']
    assert recs[0]['percentage'] == 100
