"""Record types shared by the Budgetify aggregation and service layers.

Rows arrive from the store as plain dictionaries (camelCase or
snake_case keys).  The ``from_record`` constructors normalise them into
dataclasses and turn free-form type/status strings into closed
enumerations so a typo fails loudly instead of landing in an empty bucket.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from .errors import ValidationError

E = TypeVar('E', bound=Enum)


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


class ShareStatus(str, Enum):
    PENDING = 'pending'
    PAID = 'paid'
    DECLINED = 'declined'


class SplitMode(str, Enum):
    EQUAL = 'equal'
    CUSTOM = 'custom'


def parse_enum(enum_cls: Type[E], value: Any) -> E:
    """Coerce ``value`` into ``enum_cls`` or raise :class:`ValidationError`."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {enum_cls.__name__} {value!r}; expected one of: {allowed}"
        ) from None


def _pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _require(record: Mapping[str, Any], key: str) -> Any:
    value = _pick(record, key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return value


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be numeric, got {value!r}") from None


@dataclass
class Transaction:
    id: str
    amount: float
    description: str
    category: str
    type: TransactionType
    date: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Transaction':
        return cls(
            id=str(_pick(record, 'id', default='')),
            amount=_to_float(_pick(record, 'amount', default=0.0), 'amount'),
            description=str(_pick(record, 'description', default='')),
            category=str(_pick(record, 'category', default='')),
            type=parse_enum(TransactionType, _require(record, 'type')),
            date=str(_pick(record, 'date', default='')),
        )

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record['type'] = self.type.value
        return record


@dataclass
class Investment:
    id: str
    name: str
    value: float
    initial_value: float
    return_rate: float
    type: str
    start_date: str = ''

    @property
    def gain(self) -> float:
        return self.value - self.initial_value

    @property
    def gain_percent(self) -> Optional[float]:
        """Percentage gain over the initial value, ``None`` when that is zero."""
        if not self.initial_value:
            return None
        return self.gain / self.initial_value * 100

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Investment':
        return cls(
            id=str(_pick(record, 'id', default='')),
            name=str(_pick(record, 'name', default='')),
            value=_to_float(_pick(record, 'value', default=0.0), 'value'),
            initial_value=_to_float(
                _pick(record, 'initial_value', 'initialValue', default=0.0), 'initial_value'
            ),
            return_rate=_to_float(
                _pick(record, 'return_rate', 'returnRate', default=0.0), 'return_rate'
            ),
            type=str(_pick(record, 'type', default='Other')),
            start_date=str(_pick(record, 'start_date', 'startDate', default='')),
        )

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BudgetSheet:
    id: str
    name: str
    owner_id: str
    description: Optional[str] = None
    is_default: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'BudgetSheet':
        return cls(
            id=str(_pick(record, 'id', default='')),
            name=str(_pick(record, 'name', default='')),
            owner_id=str(_pick(record, 'owner_id', 'user_id', default='')),
            description=_pick(record, 'description'),
            is_default=bool(_pick(record, 'is_default', default=False)),
        )

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BudgetEntry:
    id: str
    sheet_id: str
    type: TransactionType
    category: str
    amount: float
    date: str
    description: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'BudgetEntry':
        return cls(
            id=str(_pick(record, 'id', default='')),
            sheet_id=str(_pick(record, 'sheet_id', 'sheetId', default='')),
            type=parse_enum(TransactionType, _require(record, 'type')),
            category=str(_pick(record, 'category', default='')),
            amount=_to_float(_pick(record, 'amount', default=0.0), 'amount'),
            date=str(_pick(record, 'date', default='')),
            description=_pick(record, 'description'),
        )

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record['type'] = self.type.value
        return record


@dataclass
class Share:
    user_id: str
    amount: float
    status: ShareStatus = ShareStatus.PENDING

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Share':
        return cls(
            user_id=str(_pick(record, 'user_id', 'userId', default='')),
            amount=_to_float(_pick(record, 'amount', default=0.0), 'amount'),
            status=parse_enum(ShareStatus, _pick(record, 'status', default='pending')),
        )

    def to_record(self) -> Dict[str, Any]:
        return {'user_id': self.user_id, 'amount': self.amount, 'status': self.status.value}


@dataclass
class SplitExpense:
    id: str
    title: str
    category: str
    total_amount: float
    creator_id: str
    date: str
    currency: str = 'USD'
    description: Optional[str] = None
    shares: List[Share] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'SplitExpense':
        return cls(
            id=str(_pick(record, 'id', default='')),
            title=str(_pick(record, 'title', default='')),
            category=str(_pick(record, 'category', default='')),
            total_amount=_to_float(
                _pick(record, 'total_amount', 'totalAmount', default=0.0), 'total_amount'
            ),
            creator_id=str(_pick(record, 'creator_id', 'creatorId', default='')),
            date=str(_pick(record, 'date', default='')),
            currency=str(_pick(record, 'currency', default='USD')),
            description=_pick(record, 'description'),
            shares=[Share.from_record(s) for s in _pick(record, 'shares', default=[])],
        )

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record['shares'] = [share.to_record() for share in self.shares]
        return record
