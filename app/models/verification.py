"""Vendor/broker applications awaiting admin review.

The user account is created only when an admin approves. Rows are never deleted;
they remain as the audit trail of every decision.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from app.database import Base
from app.models.user import UserRole


class VerificationStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Verification(Base):
    __tablename__ = "verifications"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)  # vendor or broker only
    rera_id = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)

    status = Column(SQLEnum(VerificationStatus), nullable=False, default=VerificationStatus.pending, index=True)
    rejection_reason = Column(Text, nullable=True)  # set iff rejected

    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
