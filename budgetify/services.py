"""Service layer: persistence and user notifications around the pure aggregations.

Each method loads the user's records from the injected repository, calls
into the aggregation modules and, for mutations, reports the outcome to
a ``notifier(level, message)`` callback (``'success'`` or ``'error'``).
Validation problems are reported and then re-raised so callers can react.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from . import grouping, investments, splits, summary
from .errors import BudgetifyError, NotFoundError, ValidationError
from .models import (
    BudgetEntry,
    BudgetSheet,
    Investment,
    ShareStatus,
    SplitExpense,
    SplitMode,
    Transaction,
    TransactionType,
    parse_enum,
)
from .storage import Repository, user_key

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


def log_notifier(level: str, message: str) -> None:
    """Default notifier: route notifications to the log."""
    if level == 'error':
        logger.warning(message)
    else:
        logger.info(message)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_iso() -> str:
    return datetime.now().isoformat(timespec='seconds')


class BudgetifyService:
    """Per-user operations over a :class:`~budgetify.storage.Repository`."""

    def __init__(self, repository: Repository, user_id: Optional[str] = None, notifier: Optional[Notifier] = None):
        self.repository = repository
        self.user_id = user_id
        self.notify = notifier or log_notifier

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _key(self, kind: str) -> str:
        return user_key(kind, self.user_id)

    def _load(self, kind: str, default: Any) -> Any:
        return self.repository.get(self._key(kind), default)

    def _save(self, kind: str, value: Any) -> None:
        self.repository.set(self._key(kind), value)

    def _fail(self, message: str, exc: BudgetifyError) -> None:
        self.notify('error', f"{message}: {exc}")
        raise exc

    # ------------------------------------------------------------------
    # transactions
    # ------------------------------------------------------------------

    def list_transactions(self) -> List[Transaction]:
        return [Transaction.from_record(r) for r in self._load('transactions', [])]

    def add_transaction(
        self,
        amount: float,
        description: str,
        category: str,
        type: Union[str, TransactionType] = TransactionType.EXPENSE,
        date: Optional[str] = None,
    ) -> Transaction:
        """Validate and store a transaction, newest first."""
        try:
            if not description or not str(description).strip() or not category:
                raise ValidationError("Please fill in all fields")
            try:
                value = float(amount)
            except (TypeError, ValueError):
                raise ValidationError("Please enter a valid amount") from None
            if value <= 0:
                raise ValidationError("Please enter a valid amount")
            transaction = Transaction(
                id=_new_id(),
                amount=value,
                description=str(description).strip(),
                category=category,
                type=parse_enum(TransactionType, type),
                date=date or _now_iso(),
            )
        except ValidationError as exc:
            self._fail("Could not add transaction", exc)

        rows = self._load('transactions', [])
        self._save('transactions', [transaction.to_record()] + rows)
        self.notify('success', "Transaction added successfully")
        return transaction

    def delete_transaction(self, transaction_id: str) -> None:
        rows = self._load('transactions', [])
        remaining = [r for r in rows if r.get('id') != transaction_id]
        if len(remaining) == len(rows):
            self._fail("Could not delete transaction", NotFoundError(f"Unknown transaction {transaction_id}"))
        self._save('transactions', remaining)
        self.notify('success', "Transaction deleted")

    def dashboard_summary(self, stated_income: float = 0.0) -> summary.Summary:
        return summary.calculate_summary(self.list_transactions(), stated_income)

    def expense_breakdown(self, sort_by: Optional[str] = 'value') -> List[Dict[str, object]]:
        grouped = grouping.group_by_category(self.list_transactions(), TransactionType.EXPENSE)
        return grouping.category_chart_data(grouped, sort_by=sort_by)

    # ------------------------------------------------------------------
    # budget diaries
    # ------------------------------------------------------------------

    def list_sheets(self) -> List[BudgetSheet]:
        return [BudgetSheet.from_record(r) for r in self._load('sheets', [])]

    def _sheet_rows(self, sheet_id: str) -> List[Dict[str, Any]]:
        rows = self._load('sheets', [])
        if not any(r.get('id') == sheet_id for r in rows):
            self._fail("Budget diary not found", NotFoundError(f"Unknown budget sheet {sheet_id}"))
        return rows

    def create_sheet(self, name: str, description: Optional[str] = None) -> BudgetSheet:
        if not name or not name.strip():
            self._fail("Could not create budget diary", ValidationError("name is required"))
        rows = self._load('sheets', [])
        sheet = BudgetSheet(
            id=_new_id(),
            name=name.strip(),
            owner_id=self.user_id or 'demo',
            description=description,
            is_default=not rows,
        )
        self._save('sheets', rows + [sheet.to_record()])
        self.notify('success', f"Created budget diary: {sheet.name}")
        return sheet

    def rename_sheet(self, sheet_id: str, name: str, description: Optional[str] = None) -> BudgetSheet:
        if not name or not name.strip():
            self._fail("Failed to rename budget diary", ValidationError("name is required"))
        rows = self._sheet_rows(sheet_id)
        for row in rows:
            if row['id'] == sheet_id:
                row['name'] = name.strip()
                row['description'] = description
                renamed = BudgetSheet.from_record(row)
        self._save('sheets', rows)
        self.notify('success', f"Renamed budget diary to {renamed.name}")
        return renamed

    def delete_sheet(self, sheet_id: str) -> None:
        rows = self._sheet_rows(sheet_id)
        self._save('sheets', [r for r in rows if r['id'] != sheet_id])
        entries = self._load('entries', {})
        entries.pop(sheet_id, None)
        self._save('entries', entries)
        self.notify('success', "Budget diary deleted")

    def list_entries(self, sheet_id: str) -> List[BudgetEntry]:
        return [BudgetEntry.from_record(r) for r in self._load('entries', {}).get(sheet_id, [])]

    def add_entry(
        self,
        sheet_id: str,
        type: Union[str, TransactionType],
        category: str,
        amount: float,
        date: Optional[str] = None,
        description: Optional[str] = None,
    ) -> BudgetEntry:
        self._sheet_rows(sheet_id)
        try:
            if not category:
                raise ValidationError("category is required")
            if float(amount) <= 0:
                raise ValidationError("amount must be positive")
            entry = BudgetEntry(
                id=_new_id(),
                sheet_id=sheet_id,
                type=parse_enum(TransactionType, type),
                category=category,
                amount=float(amount),
                date=date or _now_iso(),
                description=description,
            )
        except (TypeError, ValueError) as exc:
            error = exc if isinstance(exc, ValidationError) else ValidationError(str(exc))
            self._fail("Could not add entry", error)
        entries = self._load('entries', {})
        entries.setdefault(sheet_id, []).append(entry.to_record())
        self._save('entries', entries)
        self.notify('success', "Entry added")
        return entry

    def delete_entry(self, sheet_id: str, entry_id: str) -> None:
        entries = self._load('entries', {})
        rows = entries.get(sheet_id, [])
        remaining = [r for r in rows if r.get('id') != entry_id]
        if len(remaining) == len(rows):
            self._fail("Could not delete entry", NotFoundError(f"Unknown entry {entry_id}"))
        entries[sheet_id] = remaining
        self._save('entries', entries)
        self.notify('success', "Entry deleted")

    def sheet_summary(self, sheet_id: str) -> Dict[str, float]:
        return summary.summarize_entries(self.list_entries(sheet_id))

    # ------------------------------------------------------------------
    # investments
    # ------------------------------------------------------------------

    def list_investments(self) -> List[Investment]:
        return [Investment.from_record(r) for r in self._load('investments', [])]

    def add_investment(
        self,
        name: str,
        value: float,
        initial_value: float,
        return_rate: float,
        type: str,
        start_date: Optional[str] = None,
    ) -> Investment:
        try:
            if not name or not type:
                raise ValidationError("Please fill in all fields")
            if float(value) < 0 or float(initial_value) < 0:
                raise ValidationError("values cannot be negative")
            investment = Investment(
                id=_new_id(),
                name=name,
                value=float(value),
                initial_value=float(initial_value),
                return_rate=float(return_rate),
                type=type,
                start_date=start_date or datetime.now().date().isoformat(),
            )
        except (TypeError, ValueError) as exc:
            error = exc if isinstance(exc, ValidationError) else ValidationError(str(exc))
            self._fail("Could not add investment", error)
        rows = self._load('investments', [])
        self._save('investments', rows + [investment.to_record()])
        self.notify('success', f"Added investment: {investment.name}")
        return investment

    def portfolio_overview(self, annual_income: Optional[float] = None) -> Dict[str, Any]:
        """Everything the investment page shows: totals, composition and projection."""
        holdings = self.list_investments()
        totals = investments.portfolio_summary(holdings, annual_income)
        return {
            'summary': totals,
            'composition': investments.portfolio_composition(holdings),
            'allocation': investments.allocation_by_type(holdings),
            'growth': investments.project_growth(totals.total_value, holdings, annual_income),
        }

    # ------------------------------------------------------------------
    # split expenses
    # ------------------------------------------------------------------

    def list_split_expenses(self) -> List[SplitExpense]:
        return [SplitExpense.from_record(r) for r in self._load('splits', [])]

    def create_split_expense(
        self,
        title: str,
        total_amount: float,
        member_ids: Sequence[str],
        mode: Union[str, SplitMode] = SplitMode.EQUAL,
        custom_amounts: Optional[Dict[str, float]] = None,
        category: str = 'Other',
        description: Optional[str] = None,
        currency: str = 'USD',
    ) -> SplitExpense:
        creator = self.user_id or 'demo'
        members = list(member_ids)
        if creator not in members:
            members = [creator] + members
        try:
            expense = splits.build_split_expense(
                creator, title, total_amount, members, mode, custom_amounts,
                category=category, description=description, currency=currency,
            )
        except ValidationError as exc:
            self._fail("Failed to create split expense", exc)
        rows = self._load('splits', [])
        self._save('splits', rows + [expense.to_record()])
        self.notify('success', f"Split expense created: {expense.title}")
        return expense

    def update_share_status(self, expense_id: str, user_id: str, status: Union[str, ShareStatus]) -> SplitExpense:
        """Mark ``user_id``'s share as paid or declined."""
        rows = self._load('splits', [])
        for index, row in enumerate(rows):
            if row.get('id') != expense_id:
                continue
            expense = SplitExpense.from_record(row)
            share = next((s for s in expense.shares if s.user_id == user_id), None)
            if share is None:
                self._fail("Could not update share", NotFoundError(f"{user_id} has no share in {expense_id}"))
            try:
                splits.transition_share(share, status)
            except BudgetifyError as exc:
                self._fail("Could not update share", exc)
            rows[index] = expense.to_record()
            self._save('splits', rows)
            self.notify('success', f"Share marked as {share.status.value}")
            return expense
        self._fail("Could not update share", NotFoundError(f"Unknown split expense {expense_id}"))

    def delete_split_expense(self, expense_id: str) -> None:
        """Only the creator may delete an expense."""
        rows = self._load('splits', [])
        match = next((r for r in rows if r.get('id') == expense_id), None)
        if match is None:
            self._fail("Could not delete split expense", NotFoundError(f"Unknown split expense {expense_id}"))
        if match.get('creator_id') != (self.user_id or 'demo'):
            self._fail("Could not delete split expense", ValidationError("only the creator can delete it"))
        self._save('splits', [r for r in rows if r.get('id') != expense_id])
        self.notify('success', "Split expense deleted")
