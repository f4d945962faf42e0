from sqlalchemy import Column, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from splitledger.db.session import Base

class ExpenseSplit(Base):
    __tablename__ = "expense_splits"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    expense_id = Column(String(36), ForeignKey("expenses.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    share_amount = Column(Numeric(10, 2), nullable=False)

    expense = relationship("Expense", back_populates="splits")
