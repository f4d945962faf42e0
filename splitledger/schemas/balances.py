from decimal import Decimal
from typing import List

from pydantic import BaseModel

class Counterparty(BaseModel):
    user_id: str
    user_name: str | None = None
    amount: Decimal

class MemberBalance(BaseModel):
    user_id: str
    user_name: str | None = None
    balance: Decimal
    owes: List[Counterparty]
    owed_by: List[Counterparty]

class PlannedTransfer(BaseModel):
    from_user_id: str
    from_name: str | None = None
    to_user_id: str
    to_name: str | None = None
    amount: Decimal

class GroupBalanceOut(BaseModel):
    group_id: str
    balances: List[MemberBalance]
    settlement_plan: List[PlannedTransfer]
    current_user_balance: Decimal
