import asyncio
import logging
from dataclasses import replace
from datetime import datetime

from splitledger.core.entities import utcnow
from splitledger.core.utils import next_due_date
from splitledger.repositories.base import Stores
from splitledger.services.expense_services import copy_for_replay

logger = logging.getLogger(__name__)

async def replay_due_expenses(stores: Stores, now: datetime | None = None) -> int:
    """
    Create a fresh expense for every recurring expense that has come due.

    Each due template produces one copy per call, and its next due date
    moves forward by one period, so a template that fell far behind
    catches up one period per run.
    """
    now = now or utcnow()
    created = 0

    for group in await stores.groups.list():
        for expense in await stores.expenses.list(group_id=group.id):
            rec = expense.recurrence
            if rec is None or rec.next_due_date > now:
                continue

            if rec.end_date is not None and rec.next_due_date > rec.end_date:
                continue

            # Template advances before its copy is written
            advanced = replace(
                rec,
                next_due_date=next_due_date(rec.next_due_date, rec.frequency, rec.custom_days),
                last_created=now,
            )
            await stores.expenses.put(replace(expense, recurrence=advanced))

            new_expense = copy_for_replay(expense)
            await stores.expenses.put(new_expense)
            created += 1

            logger.info(
                "Recurring expense %s replayed as %s (%s), next due %s",
                expense.id, new_expense.id, rec.frequency, advanced.next_due_date.isoformat(),
            )

    if created:
        logger.info("Recurring expenses check: created %d expense(s)", created)

    return created

async def run_recurring_loop(stores_factory, interval_seconds: int):
    """Replay due expenses forever, every interval_seconds."""
    logger.info("Recurring expenses scheduler started (every %ss)", interval_seconds)
    while True:
        try:
            async with stores_factory() as stores:
                await replay_due_expenses(stores)
        except Exception:
            # keep the loop alive
            logger.exception("Recurring expenses check failed")
        await asyncio.sleep(interval_seconds)
