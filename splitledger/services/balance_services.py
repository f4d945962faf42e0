import logging

from splitledger.core.balance_engine import BalanceRecord, compute_balances, settlement_plan
from splitledger.core.entities import Group
from splitledger.core.utils import TOLERANCE, ZERO
from splitledger.repositories.base import Stores
from splitledger.services.group_services import user_names

logger = logging.getLogger(__name__)

async def load_group_balances(stores: Stores, group: Group) -> dict[str, BalanceRecord]:
    expenses = await stores.expenses.list(group_id=group.id)
    settlements = await stores.settlements.list(group_id=group.id)

    balances = compute_balances(expenses, settlements)

    # Members untouched by the ledger still show up, settled
    for uid in group.member_ids:
        balances.setdefault(uid, BalanceRecord())

    total = sum((r.balance for r in balances.values()), ZERO)
    logger.info(
        "Group %s balances: %d users, %d expenses, %d settlements, sum %s",
        group.id, len(balances), len(expenses), len(settlements), total,
    )
    if abs(total) >= TOLERANCE:
        logger.warning("Group %s balances do not sum to zero (off by %s)", group.id, total)

    return balances

def format_balances(balances: dict[str, BalanceRecord], names: dict[str, str]):
    return [
        {
            "user_id": uid,
            "user_name": names.get(uid),
            "balance": record.balance,
            "owes": [
                {"user_id": cid, "user_name": names.get(cid), "amount": amt}
                for cid, amt in record.owes.items()
            ],
            "owed_by": [
                {"user_id": did, "user_name": names.get(did), "amount": amt}
                for did, amt in record.owed_by.items()
            ],
        }
        for uid, record in balances.items()
    ]

def format_plan(balances: dict[str, BalanceRecord], names: dict[str, str]):
    return [
        {
            "from_user_id": t.from_user_id,
            "from_name": names.get(t.from_user_id),
            "to_user_id": t.to_user_id,
            "to_name": names.get(t.to_user_id),
            "amount": t.amount,
        }
        for t in settlement_plan(balances)
    ]

async def get_group_balances(stores: Stores, group: Group, current_user_id: str):
    balances = await load_group_balances(stores, group)
    names = await user_names(stores, balances.keys())

    current = balances.get(current_user_id)

    return {
        "group_id": group.id,
        "balances": format_balances(balances, names),
        "settlement_plan": format_plan(balances, names),
        "current_user_balance": current.balance if current else ZERO,
    }
