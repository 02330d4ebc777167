"""Signup, OTP, login and profile schemas."""
import re
from pydantic import EmailStr, field_validator, model_validator

from app.models.otp import OtpType
from app.models.user import UserRole, PRIVILEGED_ROLES, PROFESSIONAL_ROLES
from app.schemas.base import APIModel
from app.schemas.user import UserResponse

PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15


def _clean_phone(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    digits = re.sub(r"\D", "", value)
    if len(digits) < PHONE_MIN_DIGITS:
        raise ValueError(f"Phone number must have at least {PHONE_MIN_DIGITS} digits.")
    if len(digits) > PHONE_MAX_DIGITS:
        raise ValueError(f"Phone number cannot exceed {PHONE_MAX_DIGITS} digits.")
    return value.strip()


def _require_text(value: str, label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(f"{label} is required")
    return value


class SignupRequest(APIModel):
    """Direct signup. Vendors and brokers are routed to the verification queue instead."""
    name: str
    email: EmailStr
    password: str
    confirm_password: str | None = None
    role: UserRole = UserRole.customer
    phone: str | None = None
    company: str | None = None
    rera_id: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return _require_text(v, "Name")

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        return _clean_phone(v)

    @model_validator(mode="after")
    def check_role_and_passwords(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        if self.role in PRIVILEGED_ROLES:
            raise ValueError("This role cannot be requested at signup")
        if self.role in PROFESSIONAL_ROLES and not (self.rera_id or "").strip():
            raise ValueError("RERA ID is required for vendor and broker accounts")
        return self


class SignupResponse(APIModel):
    message: str
    email: str
    # "otp" when an email code was sent, "review" when queued for admin approval
    next_step: str
    verification_id: int | None = None


class VerifyOtpRequest(APIModel):
    """Signup email verification. Password-reset codes are consumed by reset-password."""
    email: EmailStr
    code: str


class ResendOtpRequest(APIModel):
    email: EmailStr
    type: OtpType = OtpType.signup


class LoginRequest(APIModel):
    email: EmailStr
    password: str


class Token(APIModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ForgotPasswordRequest(APIModel):
    email: EmailStr


class ResetPasswordRequest(APIModel):
    email: EmailStr
    code: str
    new_password: str
    confirm_password: str | None = None

    @model_validator(mode="after")
    def passwords_match(self):
        if not self.new_password:
            raise ValueError("New password is required")
        if self.confirm_password is not None and self.confirm_password != self.new_password:
            raise ValueError("Passwords do not match")
        return self


class ProfileUpdate(APIModel):
    """Self-service edits; role and status are admin-only."""
    name: str | None = None
    phone: str | None = None
    company: str | None = None
    avatar: str | None = None

    @field_validator("phone")
    @classmethod
    def phone_valid(cls, v: str | None) -> str | None:
        # "" is kept so the handler can tell "clear it" from "not sent"
        if v is not None and not v.strip():
            return ""
        return _clean_phone(v)
