"""Split-expense share calculation and share status lifecycle.

Equal splits are computed in whole cents.  When the total does not
divide evenly, the **last member absorbs the remainder** so the shares
always add back up to the total (100.00 / 3 -> 33.33, 33.33, 33.34).
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .errors import ShareTransitionError, ValidationError
from .models import Share, ShareStatus, SplitExpense, SplitMode, parse_enum

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

# pending is the only status that can still change
ALLOWED_TRANSITIONS = {
    ShareStatus.PENDING: {ShareStatus.PAID, ShareStatus.DECLINED},
    ShareStatus.PAID: set(),
    ShareStatus.DECLINED: set(),
}


def _cents(value: Union[float, int, str, Decimal]) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_shares(
    total: Union[float, int, Decimal],
    member_ids: Sequence[str],
    mode: Union[str, SplitMode] = SplitMode.EQUAL,
    custom_amounts: Optional[Dict[str, float]] = None,
) -> List[Dict[str, object]]:
    """Decompose ``total`` into per-member shares.

    Args:
        total: Amount to split
        member_ids: Members in display order. Equal shares are truncated to
            the cent and the last member takes the leftover cents
        mode: ``'equal'`` or ``'custom'``
        custom_amounts: Amount per member id, required for ``'custom'``

    Returns:
        ``[{'userId': str, 'amount': float}]`` in ``member_ids`` order.

    Raises:
        ValidationError: Unknown mode or missing custom amounts.
    """
    split_mode = parse_enum(SplitMode, mode)
    members = list(member_ids or [])
    if not members:
        return []

    if split_mode is SplitMode.CUSTOM:
        if custom_amounts is None:
            raise ValidationError("custom split requires custom_amounts")
        missing = [m for m in members if m not in custom_amounts]
        if missing:
            raise ValidationError(f"No custom amount for: {', '.join(missing)}")
        shares = [{'userId': m, 'amount': float(_cents(custom_amounts[m]))} for m in members]
        allocated = sum(_cents(custom_amounts[m]) for m in members)
        if allocated != _cents(total):
            logger.warning("Custom shares add up to %s but the expense total is %s", allocated, _cents(total))
        return shares

    total_cents = _cents(total)
    each = (total_cents / len(members)).quantize(CENT, rounding=ROUND_DOWN)
    amounts = [each] * len(members)
    amounts[-1] = total_cents - each * (len(members) - 1)
    return [{'userId': m, 'amount': float(a)} for m, a in zip(members, amounts)]


def build_split_expense(
    creator_id: str,
    title: str,
    total_amount: float,
    member_ids: Sequence[str],
    mode: Union[str, SplitMode] = SplitMode.EQUAL,
    custom_amounts: Optional[Dict[str, float]] = None,
    category: str = 'Other',
    description: Optional[str] = None,
    currency: str = 'USD',
    date: Optional[str] = None,
    expense_id: Optional[str] = None,
) -> SplitExpense:
    """Create a :class:`SplitExpense`; the creator's own share starts as paid."""
    if not title or not title.strip():
        raise ValidationError("title is required")
    if total_amount <= 0:
        raise ValidationError("total_amount must be positive")
    shares = [
        Share(
            user_id=row['userId'],
            amount=row['amount'],
            status=ShareStatus.PAID if row['userId'] == creator_id else ShareStatus.PENDING,
        )
        for row in calculate_shares(total_amount, member_ids, mode, custom_amounts)
    ]
    return SplitExpense(
        id=expense_id or str(uuid.uuid4()),
        title=title.strip(),
        category=category,
        total_amount=float(total_amount),
        creator_id=creator_id,
        date=date or datetime.now().date().isoformat(),
        currency=currency,
        description=description,
        shares=shares,
    )


def transition_share(share: Share, new_status: Union[str, ShareStatus]) -> Share:
    """Move a share to ``new_status``; only ``pending -> paid|declined`` is allowed."""
    target = parse_enum(ShareStatus, new_status)
    if target not in ALLOWED_TRANSITIONS[share.status]:
        raise ShareTransitionError(
            f"Cannot move share for {share.user_id} from {share.status.value} to {target.value}"
        )
    share.status = target
    return share


def shares_total(shares: Iterable[Share]) -> float:
    return float(sum((_cents(s.amount) for s in shares), Decimal('0')))


def outstanding_amount(expense: SplitExpense) -> float:
    """Sum of the shares still pending."""
    return shares_total(s for s in expense.shares if s.status is ShareStatus.PENDING)
