"""Vendor/broker verification workflow.

    pending --approve--> approved   (creates the user account)
    pending --reject---> rejected

Both transitions are terminal. Each is applied with a conditional UPDATE
(... WHERE id = ? AND status = 'pending') so exactly one of any concurrent
approve/reject calls wins; the losers see AlreadyProcessed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import (
    AlreadyProcessed,
    DuplicateApplication,
    EmailAlreadyRegistered,
    NotFound,
    ValidationError,
)
from app.models.records import NotificationType
from app.models.user import PROFESSIONAL_ROLES, User, UserRole, UserStatus
from app.models.verification import Verification, VerificationStatus
from app.services.auth import get_password_hash
from app.services.email import send_account_approval_email, send_account_rejection_email
from app.services.notifications import add_notification, push_notification
from app.services.otp import normalize_email

log = logging.getLogger("uvicorn.error")


@dataclass
class Decision:
    verification: Verification
    user: User | None
    email_sent: bool


def submit(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    rera_id: str,
    phone: str | None = None,
    company: str | None = None,
) -> Verification:
    name = (name or "").strip()
    email = normalize_email(email)
    rera_id = (rera_id or "").strip()
    if role not in PROFESSIONAL_ROLES:
        raise ValidationError("Only vendor and broker accounts require verification")
    if not rera_id:
        raise ValidationError("RERA ID is required for vendor and broker accounts")
    if not name or not email or not password:
        raise ValidationError("Name, email and password are required")
    if db.query(User.id).filter(User.email == email).first():
        raise EmailAlreadyRegistered()
    pending = (
        db.query(Verification.id)
        .filter(Verification.email == email, Verification.status == VerificationStatus.pending)
        .first()
    )
    if pending:
        raise DuplicateApplication()

    verification = Verification(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        role=role,
        rera_id=rera_id,
        phone=phone or None,
        company=company or None,
        status=VerificationStatus.pending,
    )
    db.add(verification)
    db.commit()
    db.refresh(verification)
    log.info("[Verification] Application %s submitted: %s as %s", verification.id, email, role.value)
    return verification


def list_verifications(db: Session, status: VerificationStatus | None = None) -> list[Verification]:
    q = db.query(Verification)
    if status:
        q = q.filter(Verification.status == status)
    return q.order_by(Verification.submitted_at.desc(), Verification.id.desc()).all()


def get_verification(db: Session, verification_id: int) -> Verification:
    verification = db.query(Verification).filter(Verification.id == verification_id).first()
    if not verification:
        raise NotFound("Verification request not found")
    return verification


def _claim(db: Session, verification_id: int, values: dict) -> None:
    """Move a pending row to a terminal state in one statement, or raise AlreadyProcessed."""
    changed = (
        db.query(Verification)
        .filter(Verification.id == verification_id, Verification.status == VerificationStatus.pending)
        .update(values, synchronize_session=False)
    )
    if changed != 1:
        db.rollback()
        raise AlreadyProcessed()


def approve(db: Session, verification_id: int, reviewer_id: int) -> Decision:
    verification = get_verification(db, verification_id)
    if verification.status != VerificationStatus.pending:
        raise AlreadyProcessed()
    if db.query(User.id).filter(User.email == verification.email).first():
        raise EmailAlreadyRegistered()

    _claim(
        db,
        verification_id,
        {
            Verification.status: VerificationStatus.approved,
            Verification.reviewed_at: datetime.now(timezone.utc),
            Verification.reviewed_by: reviewer_id,
        },
    )
    # Stored hash is carried over as-is
    user = User(
        name=verification.name,
        email=verification.email,
        hashed_password=verification.hashed_password,
        role=verification.role,
        rera_id=verification.rera_id,
        phone=verification.phone,
        company=verification.company,
        status=UserStatus.active,
        verified=True,
        is_email_verified=True,
        is_rera_verified=True,
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError:
        # signup for the same email committed between the check and the insert
        db.rollback()
        raise EmailAlreadyRegistered()
    notification = add_notification(
        db,
        user.id,
        "Account approved",
        f"Your {verification.role.value} account has been verified. Welcome aboard!",
        NotificationType.success,
    )
    db.commit()
    db.refresh(user)
    db.refresh(verification)
    log.info("[Verification] Application %s approved by user %s; created user %s", verification_id, reviewer_id, user.id)

    # The account is the outcome; delivery problems below are logged only
    email_sent = send_account_approval_email(user.email, user.name, user.role.value, user.rera_id or "")
    if not email_sent:
        log.warning("[Verification] Approval email to %s was not sent", user.email)
    push_notification(notification)
    return Decision(verification=verification, user=user, email_sent=email_sent)


def reject(db: Session, verification_id: int, reviewer_id: int, reason: str) -> Decision:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Rejection reason is required")
    verification = get_verification(db, verification_id)
    if verification.status != VerificationStatus.pending:
        raise AlreadyProcessed()

    _claim(
        db,
        verification_id,
        {
            Verification.status: VerificationStatus.rejected,
            Verification.rejection_reason: reason,
            Verification.reviewed_at: datetime.now(timezone.utc),
            Verification.reviewed_by: reviewer_id,
        },
    )
    db.commit()
    db.refresh(verification)
    log.info("[Verification] Application %s rejected by user %s", verification_id, reviewer_id)

    email_sent = send_account_rejection_email(
        verification.email, verification.name, verification.role.value, verification.rera_id, reason
    )
    if not email_sent:
        log.warning("[Verification] Rejection email to %s was not sent", verification.email)
    return Decision(verification=verification, user=None, email_sent=email_sent)
