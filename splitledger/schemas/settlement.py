from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

class SettlementCreate(BaseModel):
    from_user_id: str
    to_user_id: str
    amount: Decimal
    method: str = "manual"

class SettlementOut(BaseModel):
    id: str
    group_id: str
    from_user_id: str
    to_user_id: str
    amount: Decimal
    method: str
    created_by: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
