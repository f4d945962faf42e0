from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from splitledger.db.session import Base

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, nullable=False, server_default="")
    phone = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
