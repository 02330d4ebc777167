"""One-time codes for signup email verification and password reset."""
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from app.database import Base


class OtpType(str, enum.Enum):
    signup = "signup"
    password_reset = "password-reset"


class OTP(Base):
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    code = Column(String(10), nullable=False)
    type = Column(
        SQLEnum(OtpType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
    attempts = Column(Integer, nullable=False, default=0)
    max_attempts = Column(Integer, nullable=False, default=5)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
