# app/models/staff.py
# A user is staff iff a row exists here; roles is a JSON list of labels.
from sqlalchemy import Column, Integer, ForeignKey, JSON, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base import Base


class Staff(Base):
    __tablename__ = "staff"
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    roles = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="staff")
