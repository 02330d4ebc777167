"""Signup with email OTP, login, profile and password reset."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import SessionContext, get_session_context
from app.errors import (
    AuthenticationRequired,
    AuthorizationDenied,
    EmailAlreadyRegistered,
    EmailDeliveryFailed,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from app.models.otp import OtpType
from app.models.user import PROFESSIONAL_ROLES, User, UserStatus
from app.models.verification import Verification, VerificationStatus
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdate,
    ResendOtpRequest,
    ResetPasswordRequest,
    SignupRequest,
    SignupResponse,
    Token,
    VerifyOtpRequest,
)
from app.schemas.base import MessageResponse
from app.schemas.user import UserResponse
from app.services import otp as otp_service
from app.services import verification as verification_service
from app.services.auth import create_access_token, get_password_hash, verify_password
from app.services.email import send_otp_email, send_welcome_email
from app.services.otp import normalize_email

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token(user.id, user.email, user.role),
        user=UserResponse.model_validate(user),
    )


def _get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _issue_and_send(db: Session, email: str, otp_type: OtpType) -> None:
    """Issue a fresh code and email it. An undeliverable code is discarded."""
    otp = otp_service.issue(db, email, otp_type)
    sent = send_otp_email(otp.email, otp.code, otp_type, get_settings().otp_expire_minutes)
    if not sent:
        otp_service.discard(db, otp)
        raise EmailDeliveryFailed(
            "We could not send the verification email. Please check your email address and try again later."
        )


@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    email = normalize_email(data.email)

    if data.role in PROFESSIONAL_ROLES:
        verification = verification_service.submit(
            db,
            name=data.name,
            email=email,
            password=data.password,
            role=data.role,
            rera_id=data.rera_id or "",
            phone=data.phone,
            company=data.company,
        )
        return SignupResponse(
            message="Your application has been submitted for review. You will receive an email once it is processed.",
            email=email,
            next_step="review",
            verification_id=verification.id,
        )

    user = _get_user_by_email(db, email)
    if user and user.is_email_verified:
        raise EmailAlreadyRegistered()
    if user:
        # Unfinished signup: take the latest details and send a new code
        user.name = data.name
        user.hashed_password = get_password_hash(data.password)
        user.role = data.role
        user.phone = data.phone
        user.company = data.company
    else:
        user = User(
            name=data.name,
            email=email,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            status=UserStatus.pending,
            phone=data.phone,
            company=data.company,
        )
        db.add(user)
    db.commit()

    _issue_and_send(db, email, OtpType.signup)
    return SignupResponse(
        message="Check your email for the verification code.",
        email=email,
        next_step="otp",
    )


@router.post("/verify-otp", response_model=Token)
def verify_otp(data: VerifyOtpRequest, db: Session = Depends(get_db)):
    otp_service.verify(db, data.email, data.code, OtpType.signup)
    user = _get_user_by_email(db, data.email)
    if not user:
        raise NotFound("User not found. Please sign up again.")
    user.is_email_verified = True
    if user.status == UserStatus.pending:
        user.status = UserStatus.active
    db.commit()
    db.refresh(user)
    if not send_welcome_email(user.email, user.name):
        log.info("[Auth] Welcome email to %s not sent", user.email)
    return _token_for(user)


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp(data: ResendOtpRequest, db: Session = Depends(get_db)):
    user = _get_user_by_email(db, data.email)
    if not user:
        raise NotFound("No account found with this email")
    if data.type == OtpType.signup and user.is_email_verified:
        raise ValidationError("Email is already verified")
    _issue_and_send(db, user.email, data.type)
    return MessageResponse(message="A new code has been sent to your email.")


@router.post("/login", response_model=Token)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = _get_user_by_email(db, data.email)
    if not user:
        # Vendors/brokers awaiting review have no account yet; tell them why
        application = (
            db.query(Verification)
            .filter(Verification.email == normalize_email(data.email))
            .order_by(Verification.submitted_at.desc(), Verification.id.desc())
            .first()
        )
        if application and verify_password(data.password, application.hashed_password):
            if application.status == VerificationStatus.pending:
                raise AuthorizationDenied("Your account is pending admin verification.")
            if application.status == VerificationStatus.rejected:
                raise AuthorizationDenied(f"Your application was rejected: {application.rejection_reason}")
        raise InvalidCredentials()
    if not verify_password(data.password, user.hashed_password):
        raise InvalidCredentials()
    if user.status == UserStatus.inactive:
        raise AuthorizationDenied("Account is inactive. Please contact support.")
    if not user.is_email_verified:
        raise AuthenticationRequired("Please verify your email first. Check your inbox or request a new code.")
    return _token_for(user)


@router.post("/logout", response_model=MessageResponse)
def logout():
    # Tokens are stateless; the client drops its copy
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
def me(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    user = db.query(User).filter(User.id == session.user_id).first()
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
def update_me(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    user = db.query(User).filter(User.id == session.user_id).first()
    if data.name is not None:
        if not data.name.strip():
            raise ValidationError("Name cannot be empty")
        user.name = data.name.strip()
    if data.phone is not None:
        user.phone = data.phone or None
    if data.company is not None:
        user.company = data.company.strip() or None
    if data.avatar is not None:
        user.avatar = data.avatar.strip() or None
    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    user = _get_user_by_email(db, data.email)
    if not user:
        raise NotFound("No account found with this email")
    _issue_and_send(db, user.email, OtpType.password_reset)
    return MessageResponse(message="A password reset code has been sent to your email.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    otp_service.verify(db, data.email, data.code, OtpType.password_reset)
    user = _get_user_by_email(db, data.email)
    if not user:
        raise NotFound("No account found with this email")
    user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    log.info("[Auth] Password reset for user %s", user.id)
    return MessageResponse(message="Password has been reset. You can now sign in.")
