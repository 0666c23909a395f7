"""Tests for budgetify.services using an in-memory repository."""

from __future__ import annotations

import pytest

from budgetify.errors import NotFoundError, ShareTransitionError, ValidationError
from budgetify.models import ShareStatus
from budgetify.services import BudgetifyService
from budgetify.storage import MemoryRepository


@pytest.fixture
def notices():
    return []


@pytest.fixture
def service(notices):
    return BudgetifyService(MemoryRepository(), 'u1', notifier=lambda level, msg: notices.append((level, msg)))


def test_add_transaction_persists_newest_first(service, notices) -> None:
    service.add_transaction(5000, 'Salary', 'Salary', 'income', date='2024-03-01')
    service.add_transaction(1200, 'Groceries', 'Food', 'expense', date='2024-03-02')
    rows = service.list_transactions()
    assert [t.description for t in rows] == ['Groceries', 'Salary']
    assert service.repository.get('budgetify-transactions-u1')[0]['type'] == 'expense'
    assert notices[-1] == ('success', 'Transaction added successfully')


@pytest.mark.parametrize('amount', [0, -5, 'abc', None])
def test_add_transaction_rejects_bad_amount(service, notices, amount) -> None:
    with pytest.raises(ValidationError):
        service.add_transaction(amount, 'Lunch', 'Food')
    assert notices[-1][0] == 'error'
    assert service.list_transactions() == []


def test_add_transaction_requires_fields(service) -> None:
    with pytest.raises(ValidationError):
        service.add_transaction(10, '', 'Food')


def test_delete_transaction(service, notices) -> None:
    txn = service.add_transaction(10, 'Tea', 'Food')
    service.delete_transaction(txn.id)
    assert service.list_transactions() == []
    with pytest.raises(NotFoundError):
        service.delete_transaction(txn.id)
    assert notices[-1][0] == 'error'


def test_dashboard_summary_and_breakdown(service) -> None:
    service.add_transaction(5000, 'Salary', 'Salary', 'income')
    service.add_transaction(1200, 'Groceries', 'Food')
    service.add_transaction(800, 'Dinner', 'Food')
    service.add_transaction(300, 'Bus pass', 'Transport')
    result = service.dashboard_summary()
    assert result.balance == 2700
    assert service.expense_breakdown() == [
        {'name': 'Food', 'value': 2000.0},
        {'name': 'Transport', 'value': 300.0},
    ]


def test_users_are_isolated(service) -> None:
    service.add_transaction(10, 'Tea', 'Food')
    other = BudgetifyService(service.repository, 'u2')
    assert other.list_transactions() == []


def test_budget_sheet_lifecycle(service) -> None:
    sheet = service.create_sheet('Household', 'Shared costs')
    assert sheet.is_default
    assert not service.create_sheet('Holiday').is_default

    service.add_entry(sheet.id, 'income', 'Salary', 3000, date='2024-01-01')
    rent = service.add_entry(sheet.id, 'expense', 'Rent', 1200, date='2024-01-02')
    assert service.sheet_summary(sheet.id) == {'income': 3000.0, 'expenses': 1200.0, 'balance': 1800.0}

    service.delete_entry(sheet.id, rent.id)
    assert service.sheet_summary(sheet.id)['balance'] == 3000.0

    renamed = service.rename_sheet(sheet.id, 'Home')
    assert renamed.name == 'Home'
    assert [s.name for s in service.list_sheets()] == ['Home', 'Holiday']

    service.delete_sheet(sheet.id)
    assert [s.name for s in service.list_sheets()] == ['Holiday']
    assert service.list_entries(sheet.id) == []


def test_sheet_errors(service) -> None:
    with pytest.raises(ValidationError):
        service.create_sheet('   ')
    with pytest.raises(NotFoundError):
        service.add_entry('nope', 'expense', 'Rent', 10)
    sheet = service.create_sheet('Main')
    with pytest.raises(ValidationError):
        service.add_entry(sheet.id, 'expense', 'Rent', -1)
    with pytest.raises(ValidationError):
        service.add_entry(sheet.id, 'transfer', 'Rent', 10)


def test_portfolio_overview(service) -> None:
    service.add_investment('Index Fund', 6000, 5000, 12, 'Mutual Fund')
    service.add_investment('Bond', 4000, 4000, 7, 'Bonds')
    overview = service.portfolio_overview()
    assert overview['summary'].total_gain == 1000
    assert len(overview['growth']) == 24
    assert overview['summary'].projected_value == overview['growth'][-1]['value']
    assert [row['name'] for row in overview['allocation']] == ['Mutual Fund', 'Bonds']


def test_portfolio_overview_without_holdings_uses_income(service) -> None:
    overview = service.portfolio_overview(annual_income=1_200_000)
    assert overview['growth'][0]['value'] == 121000


def test_add_investment_validation(service) -> None:
    with pytest.raises(ValidationError):
        service.add_investment('', 1, 1, 1, 'Stocks')
    with pytest.raises(ValidationError):
        service.add_investment('X', 'ten', 1, 1, 'Stocks')


def test_split_expense_flow(service, notices) -> None:
    expense = service.create_split_expense('Dinner', 100, ['u2', 'u3'])
    assert [s.user_id for s in expense.shares] == ['u1', 'u2', 'u3']
    assert [s.amount for s in expense.shares] == [33.33, 33.33, 33.34]

    updated = service.update_share_status(expense.id, 'u2', 'paid')
    assert {s.user_id: s.status for s in updated.shares}['u2'] is ShareStatus.PAID
    stored = service.list_split_expenses()[0]
    assert stored.shares[1].status is ShareStatus.PAID

    with pytest.raises(ShareTransitionError):
        service.update_share_status(expense.id, 'u2', 'declined')
    assert notices[-1][0] == 'error'

    with pytest.raises(NotFoundError):
        service.update_share_status(expense.id, 'u9', 'paid')
    with pytest.raises(NotFoundError):
        service.update_share_status('missing', 'u2', 'paid')


def test_only_creator_deletes_split_expense(service) -> None:
    expense = service.create_split_expense('Cab', 30, ['u2'])
    friend = BudgetifyService(service.repository, 'u2')
    friend.repository.set('budgetify-splits-u2', service.repository.get('budgetify-splits-u1'))
    with pytest.raises(ValidationError):
        friend.delete_split_expense(expense.id)
    service.delete_split_expense(expense.id)
    assert service.list_split_expenses() == []
