from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from splitledger.db.session import Base

class Group(Base):
    __tablename__ = 'groups'

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False, server_default="group")
    created_by = Column(String(36), ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.joined_at",
    )
