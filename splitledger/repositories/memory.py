from typing import Dict, Generic, List, Optional

from splitledger.core.entities import Expense, Group, Settlement, User
from splitledger.repositories.base import (
    ExpenseRepository,
    GroupRepository,
    SettlementRepository,
    Stores,
    T,
    UserRepository,
)


class _MemoryRepository(Generic[T]):
    def __init__(self):
        self._items: Dict[str, T] = {}

    async def get(self, id: str) -> Optional[T]:
        return self._items.get(id)

    async def list(self, **filters) -> List[T]:
        items = [
            item for item in self._items.values()
            if all(getattr(item, key) == value for key, value in filters.items())
        ]
        return sorted(items, key=lambda x: x.created_at, reverse=True)

    async def put(self, item: T) -> T:
        self._items[item.id] = item
        return item

    async def delete(self, id: str) -> bool:
        return self._items.pop(id, None) is not None


class MemoryUserRepository(_MemoryRepository[User], UserRepository):
    async def get_by_phone(self, phone: str) -> Optional[User]:
        for user in self._items.values():
            if user.phone == phone:
                return user
        return None


class MemoryGroupRepository(_MemoryRepository[Group], GroupRepository):
    async def list(self, member_id: Optional[str] = None, **filters) -> List[Group]:
        groups = await super().list(**filters)
        if member_id is None:
            return groups
        return [g for g in groups if g.has_member(member_id)]

    async def find_direct(self, user_a: str, user_b: str) -> Optional[Group]:
        for group in self._items.values():
            if group.type == "direct" and set(group.member_ids) == {user_a, user_b}:
                return group
        return None


class MemoryExpenseRepository(_MemoryRepository[Expense], ExpenseRepository):
    pass


class MemorySettlementRepository(_MemoryRepository[Settlement], SettlementRepository):
    pass


def memory_stores() -> Stores:
    return Stores(
        users=MemoryUserRepository(),
        groups=MemoryGroupRepository(),
        expenses=MemoryExpenseRepository(),
        settlements=MemorySettlementRepository(),
    )
