import logging
from dataclasses import replace
from decimal import Decimal

from fastapi import HTTPException

from splitledger.core.entities import (
    Expense,
    Group,
    MultiplePayers,
    Payment,
    Recurrence,
    SinglePayer,
    Split,
    utcnow,
)
from splitledger.core.utils import next_due_date, within_tolerance, ZERO
from splitledger.repositories.base import Stores
from splitledger.schemas.expense import ExpenseCreate, MultiplePayersInput, SinglePayerInput

logger = logging.getLogger(__name__)

def resolve_payers(data: ExpenseCreate, current_user_id: str):
    """Turn the request's payer fields into (paid_by, paid_by_data)."""
    allocation = data.paid_by_data

    if isinstance(allocation, MultiplePayersInput):
        if not allocation.payments:
            raise HTTPException(400, "At least one payer is required")

        payer_ids = [p.user_id for p in allocation.payments]
        if len(payer_ids) != len(set(payer_ids)):
            raise HTTPException(400, "Duplicate users found in payers")

        if any(p.amount <= 0 for p in allocation.payments):
            raise HTTPException(400, "Payment amounts must be positive")

        total_paid = sum((p.amount for p in allocation.payments), ZERO)
        if not within_tolerance(total_paid, data.amount):
            raise HTTPException(400, "Sum of payments must equal total amount")

        paid_by = data.paid_by if data.paid_by in payer_ids else payer_ids[0]
        payments = tuple(Payment(user_id=p.user_id, amount=p.amount) for p in allocation.payments)
        return paid_by, MultiplePayers(payments=payments)

    if isinstance(allocation, SinglePayerInput):
        return allocation.user_id, SinglePayer(user_id=allocation.user_id)

    return data.paid_by or current_user_id, None

def validate_splits(splits, amount: Decimal):
    if not splits:
        raise HTTPException(400, "Splits array is required")

    user_ids = [s.user_id for s in splits]

    if len(user_ids) != len(set(user_ids)):
        raise HTTPException(400, "Duplicate users found in splits")

    if any(s.share_amount <= 0 for s in splits):
        raise HTTPException(400, "Split amounts must be positive")

    total = sum((s.share_amount for s in splits), ZERO)
    if not within_tolerance(total, amount):
        raise HTTPException(400, "Sum of split amounts must equal total amount")

def build_recurrence(data: ExpenseCreate, created_at) -> Recurrence | None:
    rec = data.recurring
    if rec is None:
        return None

    if rec.frequency == "custom" and (not rec.custom_days or rec.custom_days < 1):
        raise HTTPException(400, "Custom recurrence needs a positive number of days")

    start = rec.start_date or created_at
    return Recurrence(
        frequency=rec.frequency,
        next_due_date=next_due_date(start, rec.frequency, rec.custom_days),
        custom_days=rec.custom_days,
        end_date=rec.end_date,
    )

def build_expense(group: Group, data: ExpenseCreate, current_user_id: str) -> Expense:
    if data.amount <= 0:
        raise HTTPException(400, "Amount must be positive")

    validate_splits(data.splits, data.amount)
    paid_by, paid_by_data = resolve_payers(data, current_user_id)

    expense = Expense(
        group_id=group.id,
        amount=data.amount,
        paid_by=paid_by,
        paid_by_data=paid_by_data,
        splits=tuple(Split(user_id=s.user_id, share_amount=s.share_amount) for s in data.splits),
        description=data.description,
        category=data.category,
        created_by=current_user_id,
    )

    outsiders = [uid for uid in expense.participant_ids() if not group.has_member(uid)]
    if outsiders:
        raise HTTPException(400, "Some users in expense are not group members")

    return replace(expense, recurrence=build_recurrence(data, expense.created_at))

async def create_expense(stores: Stores, group: Group, data: ExpenseCreate, user_id: str) -> Expense:
    expense = build_expense(group, data, user_id)
    await stores.expenses.put(expense)
    logger.info(
        "Expense %s created in group %s by %s: amount=%s payers=%d splits=%d",
        expense.id, group.id, user_id, expense.amount,
        len(expense.payer_entries()), len(expense.splits),
    )
    return expense

async def get_group_expense(stores: Stores, group: Group, expense_id: str) -> Expense:
    expense = await stores.expenses.get(expense_id)

    if not expense or expense.group_id != group.id:
        raise HTTPException(404, "Expense not found")

    return expense

def _check_owner(expense: Expense, user_id: str):
    owner = expense.created_by or expense.paid_by
    if owner != user_id:
        raise HTTPException(403, "You can't modify this expense")

async def edit_expense(stores: Stores, group: Group, expense_id: str, data: ExpenseCreate, user_id: str) -> Expense:
    existing = await get_group_expense(stores, group, expense_id)
    _check_owner(existing, user_id)

    rebuilt = build_expense(group, data, user_id)
    expense = replace(
        rebuilt,
        id=existing.id,
        created_at=existing.created_at,
        created_by=existing.created_by,
        recurrence=rebuilt.recurrence if data.recurring else existing.recurrence,
    )
    await stores.expenses.put(expense)
    logger.info("Expense %s replaced by %s", expense.id, user_id)
    return expense

async def delete_expense(stores: Stores, group: Group, expense_id: str, user_id: str):
    expense = await get_group_expense(stores, group, expense_id)
    _check_owner(expense, user_id)

    await stores.expenses.delete(expense.id)
    logger.info("Expense %s deleted by %s", expense.id, user_id)
    return {"status": "deleted"}

async def list_group_expenses(stores: Stores, group: Group):
    return await stores.expenses.list(group_id=group.id)

def copy_for_replay(expense: Expense) -> Expense:
    """A fresh, non-recurring instance of a recurring expense."""
    return Expense(
        group_id=expense.group_id,
        amount=expense.amount,
        paid_by=expense.paid_by,
        paid_by_data=expense.paid_by_data,
        splits=expense.splits,
        description=expense.description,
        category=expense.category,
        created_by=expense.created_by,
        created_at=utcnow(),
    )
