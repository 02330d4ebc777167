"""Per-user records: documents, transactions and in-app notifications."""
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from app.database import Base


class DocumentStatus(str, enum.Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class TransactionStatus(str, enum.Enum):
    completed = "completed"
    pending = "pending"
    failed = "failed"


class PaymentMethod(str, enum.Enum):
    paypal = "PayPal"
    credit_card = "Credit Card"
    razorpay = "Razorpay"


class NotificationType(str, enum.Enum):
    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=True)
    size = Column(String(50), nullable=True)
    status = Column(SQLEnum(DocumentStatus), nullable=False, default=DocumentStatus.pending)
    url = Column(String(1000), nullable=True)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    status = Column(SQLEnum(TransactionStatus), nullable=False, default=TransactionStatus.pending, index=True)
    method = Column(SQLEnum(PaymentMethod, values_callable=lambda e: [m.value for m in e]), nullable=True)
    description = Column(Text, nullable=True)
    transaction_id = Column(String(255), nullable=True)  # payment gateway reference
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(SQLEnum(NotificationType), nullable=False, default=NotificationType.info)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
