from datetime import datetime
from typing import List

from pydantic import BaseModel

class GroupCreate(BaseModel):
    name: str

class DirectCreate(BaseModel):
    phone: str

class GroupMemberOut(BaseModel):
    id: str
    name: str
    phone: str

class GroupOut(BaseModel):
    id: str
    name: str
    type: str
    created_by: str
    member_ids: List[str]
    created_at: datetime

    class Config:
        from_attributes = True

class GroupDetailOut(BaseModel):
    id: str
    name: str
    display_name: str
    type: str
    created_at: datetime
    members: List[GroupMemberOut]
