from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from splitledger.core.entities import (
    Expense,
    Group,
    MultiplePayers,
    Payment,
    Recurrence,
    Settlement,
    SinglePayer,
    Split,
    User,
)
from splitledger.core.utils import to_decimal
from splitledger.models.expense import Expense as ExpenseRow
from splitledger.models.expense_split import ExpenseSplit as ExpenseSplitRow
from splitledger.models.group import Group as GroupRow
from splitledger.models.group_member import GroupMember as GroupMemberRow
from splitledger.models.settlement import Settlement as SettlementRow
from splitledger.models.user import User as UserRow
from splitledger.repositories.base import (
    ExpenseRepository,
    GroupRepository,
    SettlementRepository,
    Stores,
    UserRepository,
)


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive timestamps
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return _aware(datetime.fromisoformat(value)) if value else None


def dump_paid_by_data(data) -> Optional[dict]:
    if data is None:
        return None
    if isinstance(data, MultiplePayers):
        return {
            "mode": "multiple",
            "payments": [{"user_id": p.user_id, "amount": str(p.amount)} for p in data.payments],
        }
    return {"mode": "single", "user_id": data.user_id}


def load_paid_by_data(raw: Optional[dict]):
    if not raw:
        return None
    if raw.get("mode") == "multiple":
        return MultiplePayers(payments=tuple(
            Payment(user_id=p["user_id"], amount=to_decimal(p["amount"])) for p in raw["payments"]
        ))
    return SinglePayer(user_id=raw["user_id"])


def dump_recurrence(rec: Optional[Recurrence]) -> Optional[dict]:
    if rec is None:
        return None
    return {
        "frequency": rec.frequency,
        "next_due_date": rec.next_due_date.isoformat(),
        "custom_days": rec.custom_days,
        "end_date": rec.end_date.isoformat() if rec.end_date else None,
        "last_created": rec.last_created.isoformat() if rec.last_created else None,
    }


def load_recurrence(raw: Optional[dict]) -> Optional[Recurrence]:
    if not raw:
        return None
    return Recurrence(
        frequency=raw["frequency"],
        next_due_date=_parse_dt(raw["next_due_date"]),
        custom_days=raw.get("custom_days"),
        end_date=_parse_dt(raw.get("end_date")),
        last_created=_parse_dt(raw.get("last_created")),
    )


class _SqlRepository:
    def __init__(self, db: AsyncSession):
        self.db = db


class SqlUserRepository(_SqlRepository, UserRepository):
    @staticmethod
    def _to_entity(row: UserRow) -> User:
        return User(
            id=row.id,
            name=row.name,
            phone=row.phone,
            password_hash=row.password_hash,
            created_at=_aware(row.created_at),
        )

    async def get(self, id: str) -> Optional[User]:
        row = await self.db.get(UserRow, id)
        return self._to_entity(row) if row else None

    async def get_by_phone(self, phone: str) -> Optional[User]:
        res = await self.db.execute(select(UserRow).where(UserRow.phone == phone))
        row = res.scalar_one_or_none()
        return self._to_entity(row) if row else None

    async def list(self, **filters) -> List[User]:
        res = await self.db.execute(select(UserRow).filter_by(**filters).order_by(UserRow.created_at.desc()))
        return [self._to_entity(row) for row in res.scalars().all()]

    async def put(self, item: User) -> User:
        row = await self.db.get(UserRow, item.id)
        if row is None:
            row = UserRow(id=item.id, created_at=item.created_at)
            self.db.add(row)
        row.name = item.name
        row.phone = item.phone
        row.password_hash = item.password_hash
        await self.db.commit()
        return item

    async def delete(self, id: str) -> bool:
        row = await self.db.get(UserRow, id)
        if not row:
            return False
        await self.db.delete(row)
        await self.db.commit()
        return True


class SqlGroupRepository(_SqlRepository, GroupRepository):
    @staticmethod
    def _to_entity(row: GroupRow) -> Group:
        return Group(
            id=row.id,
            name=row.name,
            type=row.type,
            created_by=row.created_by,
            member_ids=tuple(m.user_id for m in row.members),
            created_at=_aware(row.created_at),
        )

    async def _row(self, id: str) -> Optional[GroupRow]:
        q = select(GroupRow).options(selectinload(GroupRow.members)).where(GroupRow.id == id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def get(self, id: str) -> Optional[Group]:
        row = await self._row(id)
        return self._to_entity(row) if row else None

    async def list(self, member_id: Optional[str] = None, **filters) -> List[Group]:
        q = (
            select(GroupRow)
            .options(selectinload(GroupRow.members))
            .filter_by(**filters)
            .order_by(GroupRow.created_at.desc())
        )
        if member_id is not None:
            q = q.join(GroupMemberRow, GroupMemberRow.group_id == GroupRow.id).where(GroupMemberRow.user_id == member_id)

        res = await self.db.execute(q)
        return [self._to_entity(row) for row in res.scalars().unique().all()]

    async def find_direct(self, user_a: str, user_b: str) -> Optional[Group]:
        for group in await self.list(member_id=user_a, type="direct"):
            if set(group.member_ids) == {user_a, user_b}:
                return group
        return None

    async def put(self, item: Group) -> Group:
        row = await self._row(item.id)
        if row is None:
            row = GroupRow(id=item.id, created_at=item.created_at, members=[])
            self.db.add(row)
        row.name = item.name
        row.type = item.type
        row.created_by = item.created_by

        current = {m.user_id for m in row.members}
        wanted = set(item.member_ids)
        row.members = [m for m in row.members if m.user_id in wanted]
        for uid in item.member_ids:
            if uid not in current:
                row.members.append(GroupMemberRow(user_id=uid))

        await self.db.commit()
        return item

    async def delete(self, id: str) -> bool:
        row = await self._row(id)
        if not row:
            return False
        await self.db.delete(row)
        await self.db.commit()
        return True


class SqlExpenseRepository(_SqlRepository, ExpenseRepository):
    @staticmethod
    def _to_entity(row: ExpenseRow) -> Expense:
        return Expense(
            id=row.id,
            group_id=row.group_id,
            amount=to_decimal(row.amount),
            paid_by=row.paid_by,
            paid_by_data=load_paid_by_data(row.paid_by_data),
            splits=tuple(Split(user_id=s.user_id, share_amount=to_decimal(s.share_amount)) for s in row.splits),
            description=row.description,
            category=row.category,
            created_by=row.created_by,
            recurrence=load_recurrence(row.recurring_data),
            created_at=_aware(row.created_at),
        )

    async def _row(self, id: str) -> Optional[ExpenseRow]:
        q = select(ExpenseRow).options(selectinload(ExpenseRow.splits)).where(ExpenseRow.id == id)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def get(self, id: str) -> Optional[Expense]:
        row = await self._row(id)
        return self._to_entity(row) if row else None

    async def list(self, **filters) -> List[Expense]:
        q = (
            select(ExpenseRow)
            .options(selectinload(ExpenseRow.splits))
            .filter_by(**filters)
            .order_by(ExpenseRow.created_at.desc(), ExpenseRow.id.desc())
        )
        res = await self.db.execute(q)
        return [self._to_entity(row) for row in res.scalars().all()]

    async def put(self, item: Expense) -> Expense:
        row = await self._row(item.id)
        if row is None:
            row = ExpenseRow(id=item.id, created_at=item.created_at, splits=[])
            self.db.add(row)

        row.group_id = item.group_id
        row.amount = item.amount
        row.paid_by = item.paid_by
        row.paid_by_data = dump_paid_by_data(item.paid_by_data)
        row.description = item.description
        row.category = item.category
        row.created_by = item.created_by
        row.recurring_data = dump_recurrence(item.recurrence)
        row.splits = [ExpenseSplitRow(user_id=s.user_id, share_amount=s.share_amount) for s in item.splits]

        await self.db.commit()
        return item

    async def delete(self, id: str) -> bool:
        row = await self._row(id)
        if not row:
            return False
        await self.db.delete(row)
        await self.db.commit()
        return True


class SqlSettlementRepository(_SqlRepository, SettlementRepository):
    @staticmethod
    def _to_entity(row: SettlementRow) -> Settlement:
        return Settlement(
            id=row.id,
            group_id=row.group_id,
            from_user_id=row.from_user_id,
            to_user_id=row.to_user_id,
            amount=to_decimal(row.amount),
            method=row.method,
            created_by=row.created_by,
            created_at=_aware(row.created_at),
        )

    async def get(self, id: str) -> Optional[Settlement]:
        row = await self.db.get(SettlementRow, id)
        return self._to_entity(row) if row else None

    async def list(self, **filters) -> List[Settlement]:
        q = select(SettlementRow).filter_by(**filters).order_by(SettlementRow.created_at.desc())
        res = await self.db.execute(q)
        return [self._to_entity(row) for row in res.scalars().all()]

    async def put(self, item: Settlement) -> Settlement:
        row = await self.db.get(SettlementRow, item.id)
        if row is None:
            row = SettlementRow(id=item.id, created_at=item.created_at)
            self.db.add(row)
        row.group_id = item.group_id
        row.from_user_id = item.from_user_id
        row.to_user_id = item.to_user_id
        row.amount = item.amount
        row.method = item.method
        row.created_by = item.created_by
        await self.db.commit()
        return item

    async def delete(self, id: str) -> bool:
        row = await self.db.get(SettlementRow, id)
        if not row:
            return False
        await self.db.delete(row)
        await self.db.commit()
        return True


def sql_stores(db: AsyncSession) -> Stores:
    return Stores(
        users=SqlUserRepository(db),
        groups=SqlGroupRepository(db),
        expenses=SqlExpenseRepository(db),
        settlements=SqlSettlementRepository(db),
    )
