"""Vendor/broker application schemas."""
from datetime import datetime
from pydantic import EmailStr

from app.models.user import UserRole
from app.models.verification import VerificationStatus
from app.schemas.base import APIModel


class VerificationCreate(APIModel):
    name: str
    email: EmailStr
    password: str
    role: UserRole
    rera_id: str
    phone: str | None = None
    company: str | None = None


class VerificationResponse(APIModel):
    id: int
    name: str
    email: str
    role: UserRole
    rera_id: str
    phone: str | None = None
    company: str | None = None
    status: VerificationStatus
    rejection_reason: str | None = None
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: int | None = None


class RejectRequest(APIModel):
    reason: str = ""


class ApprovedUser(APIModel):
    id: int
    name: str
    email: str
    role: UserRole
    rera_id: str | None = None


class ApprovalResponse(APIModel):
    message: str
    user: ApprovedUser
    email_sent: bool


class RejectionResponse(APIModel):
    message: str
    email_sent: bool
