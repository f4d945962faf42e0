from sqlalchemy import Column, String, ForeignKey, DateTime, Numeric
from sqlalchemy.sql import func
from splitledger.db.session import Base

class Settlement(Base):
    __tablename__ = "settlements"

    id = Column(String(36), primary_key=True, index=True)
    group_id = Column(String(36), ForeignKey("groups.id"), nullable=False, index=True)
    from_user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    to_user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(String(32), nullable=False, server_default="manual")
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
