from typing import Literal

from fastapi import APIRouter, Depends, Response
from splitledger.core.dependencies import get_current_user, get_stores, check_group_membership
from splitledger.repositories.base import Stores
from splitledger.schemas.balances import GroupBalanceOut
from splitledger.schemas.group import DirectCreate, GroupCreate, GroupDetailOut, GroupOut
from splitledger.schemas.settlement import SettlementCreate, SettlementOut
from splitledger.services.balance_services import get_group_balances
from splitledger.services.export_services import export_group_csv, export_group_json
from splitledger.services.group_services import create_group, get_group_detail, get_or_create_direct, join_group, list_group_for_user
from splitledger.services.settlement_service import add_settlement, edit_settlement, get_settlement_history, undo_settlement

router = APIRouter()

@router.post("/", response_model=GroupOut, description="create new group")
async def create_new_group(
    data: GroupCreate,
    stores: Stores = Depends(get_stores),
    user = Depends(get_current_user)
):
    return await create_group(stores, data.name, user.id)

@router.get("/", response_model=list[GroupOut], description="get user groups")
async def my_groups(stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    return await list_group_for_user(stores, user.id)

@router.post("/direct")
async def direct_split(data: DirectCreate, stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    group, other, is_new = await get_or_create_direct(stores, user, data.phone)
    return {
        "is_new": is_new,
        "group": {
            "id": group.id,
            "name": group.name,
            "display_name": other.display_name,
            "type": group.type,
            "other_user": {"id": other.id, "phone": other.phone, "name": other.name},
        },
    }

@router.get("/{group_id}", response_model=GroupDetailOut)
async def group_detail(group_id: str, stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, user.id)
    return await get_group_detail(stores, group, user.id)

@router.post("/{group_id}/join", response_model=GroupOut)
async def join(group_id: str, stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    return await join_group(stores, group_id, user.id)

@router.get("/{group_id}/balances", response_model=GroupBalanceOut)
async def group_balances(group_id: str, stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, user.id)
    return await get_group_balances(stores, group, user.id)

@router.get("/{group_id}/export")
async def export_group(
    group_id: str,
    format: Literal["json", "csv"] = "json",
    stores: Stores = Depends(get_stores),
    user = Depends(get_current_user)
):
    group = await check_group_membership(stores, group_id, user.id)

    if format == "csv":
        content = await export_group_csv(stores, group)
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="group-{group.id}.csv"'},
        )

    return await export_group_json(stores, group)

@router.post("/{group_id}/settlements", response_model=SettlementOut)
async def add_manual_settlement(
    group_id: str,
    data: SettlementCreate,
    stores: Stores = Depends(get_stores),
    user = Depends(get_current_user)
):
    group = await check_group_membership(stores, group_id, user.id)
    return await add_settlement(stores, group, data, user.id)

@router.get("/{group_id}/settlements", response_model=list[SettlementOut])
async def fetch_history(group_id: str, stores: Stores = Depends(get_stores), user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, user.id)
    return await get_settlement_history(stores, group)

@router.put("/{group_id}/settlements/{settlement_id}", response_model=SettlementOut)
async def edit_settlement_route(
    group_id: str,
    settlement_id: str,
    data: SettlementCreate,
    stores: Stores = Depends(get_stores),
    user = Depends(get_current_user)
):
    group = await check_group_membership(stores, group_id, user.id)
    return await edit_settlement(stores, group, settlement_id, data, user.id)

@router.delete("/{group_id}/settlements/{settlement_id}")
async def undo_settlement_route(
    group_id: str,
    settlement_id: str,
    stores: Stores = Depends(get_stores),
    user = Depends(get_current_user)
):
    group = await check_group_membership(stores, group_id, user.id)
    return await undo_settlement(stores, group, settlement_id, user.id)
