from datetime import datetime

from pydantic import BaseModel, Field

class UserCreate(BaseModel):
    phone: str
    name: str = ""
    password: str = Field(min_length=6)

class UserLogin(BaseModel):
    phone: str
    password: str

class UserEdit(BaseModel):
    name: str | None = None

class UserOut(BaseModel):
    id: str
    name: str
    phone: str
    created_at: datetime

    class Config:
        from_attributes = True
