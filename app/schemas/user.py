"""User schemas. The password hash has no field here, so it can never be serialized."""
from datetime import datetime
from pydantic import EmailStr

from app.models.user import UserRole, UserStatus
from app.schemas.base import APIModel


class UserResponse(APIModel):
    id: int
    name: str
    email: str
    role: UserRole
    status: UserStatus
    verified: bool = False
    is_email_verified: bool = False
    is_rera_verified: bool = False
    rera_id: str | None = None
    avatar: str | None = None
    phone: str | None = None
    company: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserAdminUpdate(APIModel):
    """Partial update; omitted or empty fields are left alone."""
    role: UserRole | None = None
    status: UserStatus | None = None
    name: str | None = None
    phone: str | None = None
    company: str | None = None


class AssignRoleRequest(APIModel):
    email: EmailStr
    role: UserRole


class AssignRoleResponse(APIModel):
    message: str
    user: UserResponse
