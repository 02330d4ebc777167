"""Documents, transactions and notifications."""
from datetime import datetime
from pydantic import field_validator

from app.models.records import DocumentStatus, NotificationType, PaymentMethod, TransactionStatus
from app.schemas.base import APIModel


class DocumentCreate(APIModel):
    name: str
    type: str | None = None
    size: str | None = None
    url: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Document name is required")
        return v


class DocumentResponse(APIModel):
    id: int
    user_id: int
    name: str
    type: str | None = None
    size: str | None = None
    status: DocumentStatus
    url: str | None = None
    uploaded_at: datetime | None = None


class DocumentStatusUpdate(APIModel):
    status: DocumentStatus


class TransactionCreate(APIModel):
    amount: float
    method: PaymentMethod | None = None
    description: str | None = None
    transaction_id: str | None = None

    @field_validator("amount")
    @classmethod
    def positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be greater than zero")
        return v


class TransactionUpdate(APIModel):
    status: TransactionStatus | None = None
    description: str | None = None
    transaction_id: str | None = None


class TransactionResponse(APIModel):
    id: int
    user_id: int
    amount: float
    status: TransactionStatus
    method: PaymentMethod | None = None
    description: str | None = None
    transaction_id: str | None = None
    created_at: datetime | None = None


class NotificationCreate(APIModel):
    user_id: int
    title: str
    message: str
    type: NotificationType = NotificationType.info


class NotificationResponse(APIModel):
    id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime | None = None


class BulkUpdateResponse(APIModel):
    message: str
    updated: int
