from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

class SplitInput(BaseModel):
    user_id: str
    share_amount: Decimal

class PaymentInput(BaseModel):
    user_id: str
    amount: Decimal

class SinglePayerInput(BaseModel):
    mode: Literal["single"] = "single"
    user_id: str

class MultiplePayersInput(BaseModel):
    mode: Literal["multiple"] = "multiple"
    payments: List[PaymentInput]

PayerAllocationInput = Annotated[
    Union[SinglePayerInput, MultiplePayersInput],
    Field(discriminator="mode"),
]

class RecurrenceInput(BaseModel):
    frequency: Literal["daily", "weekly", "monthly", "yearly", "custom"]
    custom_days: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def assume_utc(cls, value):
        # dates without an offset are read as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

class ExpenseCreate(BaseModel):
    amount: Decimal
    description: Optional[str] = None
    category: Optional[str] = None
    paid_by: Optional[str] = None
    paid_by_data: Optional[PayerAllocationInput] = None
    splits: List[SplitInput]
    recurring: Optional[RecurrenceInput] = None

class PaymentOut(BaseModel):
    user_id: str
    amount: Decimal

    class Config:
        from_attributes = True

class PayerAllocationOut(BaseModel):
    mode: str
    user_id: Optional[str] = None
    payments: Optional[List[PaymentOut]] = None

    class Config:
        from_attributes = True

class SplitOut(BaseModel):
    user_id: str
    share_amount: Decimal

    class Config:
        from_attributes = True

class RecurrenceOut(BaseModel):
    frequency: str
    next_due_date: datetime
    custom_days: Optional[int] = None
    end_date: Optional[datetime] = None
    last_created: Optional[datetime] = None

    class Config:
        from_attributes = True

class ExpenseOut(BaseModel):
    id: str
    group_id: str
    amount: Decimal
    description: Optional[str] = None
    category: Optional[str] = None
    paid_by: str
    paid_by_data: Optional[PayerAllocationOut] = None
    splits: List[SplitOut]
    created_by: Optional[str] = None
    recurrence: Optional[RecurrenceOut] = None
    created_at: datetime

    class Config:
        from_attributes = True
