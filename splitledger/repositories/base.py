from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from splitledger.core.entities import Expense, Group, Settlement, User

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """Keyed store of immutable ledger records."""

    @abstractmethod
    async def get(self, id: str) -> Optional[T]:
        ...

    @abstractmethod
    async def list(self, **filters) -> List[T]:
        ...

    @abstractmethod
    async def put(self, item: T) -> T:
        """Insert or replace the record with the same id."""

    @abstractmethod
    async def delete(self, id: str) -> bool:
        ...


class UserRepository(Repository[User]):
    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[User]:
        ...


class GroupRepository(Repository[Group]):
    """list(member_id=...) returns the groups a user belongs to."""

    @abstractmethod
    async def find_direct(self, user_a: str, user_b: str) -> Optional[Group]:
        ...


class ExpenseRepository(Repository[Expense]):
    """list(group_id=...) returns a group's expenses, newest first."""


class SettlementRepository(Repository[Settlement]):
    """list(group_id=...) returns a group's settlements, newest first."""


@dataclass
class Stores:
    users: UserRepository
    groups: GroupRepository
    expenses: ExpenseRepository
    settlements: SettlementRepository
