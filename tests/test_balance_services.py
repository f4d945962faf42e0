import asyncio
import logging
from decimal import Decimal

from splitledger.core.entities import Expense, Split
from splitledger.services.balance_services import load_group_balances


def test_balanced_ledger_logs_total(stores, users, trip, caplog):
    asyncio.run(stores.expenses.put(Expense(
        group_id=trip.id,
        amount=Decimal("60.00"),
        paid_by=users["alice"].id,
        splits=(Split(users["alice"].id, Decimal("30.00")), Split(users["bob"].id, Decimal("30.00"))),
    )))

    with caplog.at_level(logging.INFO, logger="splitledger.services.balance_services"):
        balances = asyncio.run(load_group_balances(stores, trip))

    assert balances[users["carol"].id].balance == 0
    assert f"Group {trip.id} balances" in caplog.text
    assert not [r for r in caplog.records if r.levelno == logging.WARNING]


def test_unbalanced_ledger_is_flagged(stores, users, trip, caplog):
    # Splits cover 60 of 100, written past the request validation
    asyncio.run(stores.expenses.put(Expense(
        group_id=trip.id,
        amount=Decimal("100.00"),
        paid_by=users["alice"].id,
        splits=(Split(users["alice"].id, Decimal("30.00")), Split(users["bob"].id, Decimal("30.00"))),
    )))

    with caplog.at_level(logging.INFO, logger="splitledger.services.balance_services"):
        asyncio.run(load_group_balances(stores, trip))

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "do not sum to zero" in warnings[0].getMessage()
    assert "40" in warnings[0].getMessage()
