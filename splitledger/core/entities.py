"""Immutable ledger records shared by the engine, the repositories and the services."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple, Union


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    name: str
    phone: str
    password_hash: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def display_name(self) -> str:
        return self.name or self.phone


@dataclass(frozen=True)
class Group:
    name: str
    created_by: str
    type: str = "group"
    member_ids: Tuple[str, ...] = ()
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.member_ids


@dataclass(frozen=True)
class Split:
    user_id: str
    share_amount: Decimal


@dataclass(frozen=True)
class Payment:
    user_id: str
    amount: Decimal


@dataclass(frozen=True)
class SinglePayer:
    user_id: str
    mode: str = "single"


@dataclass(frozen=True)
class MultiplePayers:
    payments: Tuple[Payment, ...]
    mode: str = "multiple"


PayerAllocation = Union[SinglePayer, MultiplePayers]


@dataclass(frozen=True)
class Recurrence:
    frequency: str
    next_due_date: datetime
    custom_days: Optional[int] = None
    end_date: Optional[datetime] = None
    last_created: Optional[datetime] = None


@dataclass(frozen=True)
class Expense:
    group_id: str
    amount: Decimal
    paid_by: str
    splits: Tuple[Split, ...]
    paid_by_data: Optional[PayerAllocation] = None
    description: Optional[str] = None
    category: Optional[str] = None
    created_by: Optional[str] = None
    recurrence: Optional[Recurrence] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def payer_entries(self) -> Tuple[Payment, ...]:
        """Who fronted money for this expense and how much each paid."""
        if isinstance(self.paid_by_data, MultiplePayers):
            return self.paid_by_data.payments
        return (Payment(user_id=self.paid_by, amount=self.amount),)

    def participant_ids(self) -> set:
        ids = {s.user_id for s in self.splits}
        ids.update(p.user_id for p in self.payer_entries())
        return ids


@dataclass(frozen=True)
class Settlement:
    group_id: str
    from_user_id: str
    to_user_id: str
    amount: Decimal
    method: str = "manual"
    created_by: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
