from fastapi import APIRouter, Depends
from splitledger.core.dependencies import get_current_user, get_stores, check_group_membership
from splitledger.repositories.base import Stores
from splitledger.schemas.expense import ExpenseCreate, ExpenseOut
from splitledger.services.expense_services import create_expense, delete_expense, edit_expense, get_group_expense, list_group_expenses

router = APIRouter()

@router.post("/{group_id}/expenses", response_model=ExpenseOut)
async def add_expense(group_id: str, data: ExpenseCreate, stores: Stores = Depends(get_stores), current_user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, current_user.id)
    return await create_expense(stores, group, data, current_user.id)

@router.get("/{group_id}/expenses", response_model=list[ExpenseOut], description="get all expenses of the group")
async def fetch_expenses(group_id: str, stores: Stores = Depends(get_stores), current_user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, current_user.id)
    return await list_group_expenses(stores, group)

@router.get("/{group_id}/expenses/{expense_id}", response_model=ExpenseOut)
async def fetch(group_id: str, expense_id: str, stores: Stores = Depends(get_stores), current_user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, current_user.id)
    return await get_group_expense(stores, group, expense_id)

@router.put("/{group_id}/expenses/{expense_id}", response_model=ExpenseOut)
async def edit(group_id: str, expense_id: str, data: ExpenseCreate, stores: Stores = Depends(get_stores), current_user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, current_user.id)
    return await edit_expense(stores, group, expense_id, data, current_user.id)

@router.delete("/{group_id}/expenses/{expense_id}")
async def del_expense(group_id: str, expense_id: str, stores: Stores = Depends(get_stores), current_user = Depends(get_current_user)):
    group = await check_group_membership(stores, group_id, current_user.id)
    return await delete_expense(stores, group, expense_id, current_user.id)
