from sqlalchemy import Column, String, ForeignKey, DateTime, Numeric, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from splitledger.db.session import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, index=True)
    group_id = Column(String(36), ForeignKey("groups.id"), nullable=False, index=True)
    paid_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    paid_by_data = Column(JSON, nullable=True)
    amount = Column(Numeric(10, 2), nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    recurring_data = Column(JSON, nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    splits = relationship("ExpenseSplit", back_populates="expense", cascade="all, delete-orphan")
