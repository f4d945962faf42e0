import asyncio
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from splitledger.core.entities import Expense, Recurrence, Split
from splitledger.core.utils import add_months, next_due_date
from splitledger.repositories.memory import MemoryExpenseRepository
from splitledger.services.recurring_services import replay_due_expenses


def _at(*args):
    return datetime(*args, tzinfo=timezone.utc)


def _recurring(trip, users, **rec):
    return Expense(
        group_id=trip.id,
        amount=Decimal("1200.00"),
        paid_by=users["alice"].id,
        description="Rent",
        splits=(Split(users["alice"].id, Decimal("600.00")), Split(users["bob"].id, Decimal("600.00"))),
        created_by=users["alice"].id,
        recurrence=Recurrence(**rec),
    )


def test_next_due_date_frequencies():
    start = _at(2026, 1, 31, 8)

    assert next_due_date(start, "daily") == _at(2026, 2, 1, 8)
    assert next_due_date(start, "weekly") == _at(2026, 2, 7, 8)
    assert next_due_date(start, "monthly") == _at(2026, 2, 28, 8)
    assert next_due_date(start, "yearly") == _at(2027, 1, 31, 8)
    assert next_due_date(start, "custom", 10) == _at(2026, 2, 10, 8)


def test_add_months_rolls_year_and_clamps():
    assert add_months(_at(2024, 12, 15), 1) == _at(2025, 1, 15)
    assert add_months(_at(2024, 1, 31), 1) == _at(2024, 2, 29)


def test_due_expense_is_replayed(stores, users, trip):
    template = _recurring(trip, users, frequency="monthly", next_due_date=_at(2026, 3, 1))
    asyncio.run(stores.expenses.put(template))

    created = asyncio.run(replay_due_expenses(stores, now=_at(2026, 3, 1, 12)))
    assert created == 1

    expenses = asyncio.run(stores.expenses.list(group_id=trip.id))
    assert len(expenses) == 2

    copy = next(e for e in expenses if e.id != template.id)
    assert copy.recurrence is None
    assert copy.amount == template.amount
    assert copy.splits == template.splits

    updated = asyncio.run(stores.expenses.get(template.id))
    assert updated.recurrence.next_due_date == _at(2026, 4, 1)
    assert updated.recurrence.last_created == _at(2026, 3, 1, 12)

    # Not due again until April
    assert asyncio.run(replay_due_expenses(stores, now=_at(2026, 3, 20))) == 0


def test_future_and_ended_expenses_are_skipped(stores, users, trip):
    asyncio.run(stores.expenses.put(_recurring(trip, users, frequency="weekly", next_due_date=_at(2026, 5, 1))))
    asyncio.run(stores.expenses.put(_recurring(
        trip, users, frequency="daily", next_due_date=_at(2026, 3, 5), end_date=_at(2026, 3, 1),
    )))

    assert asyncio.run(replay_due_expenses(stores, now=_at(2026, 4, 1))) == 0
    assert len(asyncio.run(stores.expenses.list(group_id=trip.id))) == 2


def test_naive_start_date_is_read_as_utc(client, auth, users, trip, stores):
    body = {
        "amount": "20.00",
        "splits": [
            {"user_id": users["alice"].id, "share_amount": "10.00"},
            {"user_id": users["bob"].id, "share_amount": "10.00"},
        ],
        "recurring": {"frequency": "daily", "start_date": "2026-01-01T09:00:00"},
    }
    resp = client.post(f"/api/v1/groups/{trip.id}/expenses", json=body, headers=auth("alice"))
    assert resp.status_code == 200

    template = asyncio.run(stores.expenses.get(resp.json()["id"]))
    assert template.recurrence.next_due_date == _at(2026, 1, 2, 9)

    assert asyncio.run(replay_due_expenses(stores, now=_at(2026, 1, 3))) == 1


def test_naive_end_date_without_start_date(client, auth, users, trip, stores):
    body = {
        "amount": "20.00",
        "splits": [
            {"user_id": users["alice"].id, "share_amount": "10.00"},
            {"user_id": users["bob"].id, "share_amount": "10.00"},
        ],
        "recurring": {"frequency": "daily", "end_date": "2099-01-01T00:00:00"},
    }
    resp = client.post(f"/api/v1/groups/{trip.id}/expenses", json=body, headers=auth("alice"))
    assert resp.status_code == 200

    template = asyncio.run(stores.expenses.get(resp.json()["id"]))
    assert template.recurrence.end_date == _at(2099, 1, 1)

    # Due, and still before the end date
    later = template.created_at + timedelta(days=2)
    assert asyncio.run(replay_due_expenses(stores, now=later)) == 1


class _CopyRejectingRepository(MemoryExpenseRepository):
    async def put(self, item):
        if item.recurrence is None:
            raise RuntimeError("write failed")
        return await super().put(item)


def test_failed_copy_does_not_replay_twice(stores, users, trip):
    stores = replace(stores, expenses=_CopyRejectingRepository())
    template = _recurring(trip, users, frequency="monthly", next_due_date=_at(2026, 3, 1))
    asyncio.run(stores.expenses.put(template))

    with pytest.raises(RuntimeError):
        asyncio.run(replay_due_expenses(stores, now=_at(2026, 3, 1, 12)))

    updated = asyncio.run(stores.expenses.get(template.id))
    assert updated.recurrence.next_due_date == _at(2026, 4, 1)

    assert asyncio.run(replay_due_expenses(stores, now=_at(2026, 3, 1, 12))) == 0
