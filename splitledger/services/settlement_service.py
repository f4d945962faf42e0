import logging
from dataclasses import replace

from fastapi import HTTPException

from splitledger.core.entities import Group, Settlement
from splitledger.repositories.base import Stores
from splitledger.schemas.settlement import SettlementCreate

logger = logging.getLogger(__name__)

def build_settlement(group: Group, data: SettlementCreate, user_id: str) -> Settlement:
    if data.from_user_id == data.to_user_id:
        raise HTTPException(400, "Cannot settle with yourself")

    if data.amount <= 0:
        raise HTTPException(400, "Amount must be positive")

    if not (group.has_member(data.from_user_id) and group.has_member(data.to_user_id)):
        raise HTTPException(400, "Both users must be group members")

    return Settlement(
        group_id=group.id,
        from_user_id=data.from_user_id,
        to_user_id=data.to_user_id,
        amount=data.amount,
        method=data.method,
        created_by=user_id,
    )

async def add_settlement(stores: Stores, group: Group, data: SettlementCreate, user_id: str) -> Settlement:
    settlement = build_settlement(group, data, user_id)
    await stores.settlements.put(settlement)
    logger.info(
        "Settlement %s in group %s: %s paid %s %s via %s",
        settlement.id, group.id, settlement.from_user_id, settlement.to_user_id,
        settlement.amount, settlement.method,
    )
    return settlement

async def get_settlement_history(stores: Stores, group: Group):
    return await stores.settlements.list(group_id=group.id)

async def _owned_settlement(stores: Stores, group: Group, settlement_id: str, user_id: str) -> Settlement:
    settlement = await stores.settlements.get(settlement_id)

    if not settlement or settlement.group_id != group.id:
        raise HTTPException(404, "Settlement not found")

    if user_id not in (settlement.created_by, settlement.from_user_id):
        raise HTTPException(403, "You can't modify this settlement")

    return settlement

async def edit_settlement(stores: Stores, group: Group, settlement_id: str, data: SettlementCreate, user_id: str) -> Settlement:
    existing = await _owned_settlement(stores, group, settlement_id, user_id)

    settlement = replace(
        build_settlement(group, data, user_id),
        id=existing.id,
        created_at=existing.created_at,
        created_by=existing.created_by,
    )
    await stores.settlements.put(settlement)
    logger.info("Settlement %s replaced by %s", settlement.id, user_id)
    return settlement

async def undo_settlement(stores: Stores, group: Group, settlement_id: str, user_id: str):
    settlement = await _owned_settlement(stores, group, settlement_id, user_id)
    await stores.settlements.delete(settlement.id)
    logger.info("Settlement %s removed by %s", settlement.id, user_id)
    return {"status": "deleted"}
