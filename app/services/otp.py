"""One-time codes: issue, verify, purge.

At most one live code exists per (email, type): issuing deletes the previous ones.
Expiry is checked at read time; purge_expired only tidies rows that are already dead.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import OtpAttemptsExceeded, OtpExpiredOrMissing, OtpMismatch
from app.models.otp import OTP, OtpType

log = logging.getLogger("uvicorn.error")

OTP_LENGTH = 6


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def generate_code(length: int = OTP_LENGTH) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


def issue(db: Session, email: str, otp_type: OtpType) -> OTP:
    settings = get_settings()
    email = normalize_email(email)
    db.query(OTP).filter(OTP.email == email, OTP.type == otp_type).delete(synchronize_session=False)
    otp = OTP(
        email=email,
        code=generate_code(),
        type=otp_type,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.otp_expire_minutes),
        attempts=0,
        max_attempts=settings.otp_max_attempts,
    )
    db.add(otp)
    db.commit()
    db.refresh(otp)
    log.info("[OTP] Issued %s code for %s (expires in %d min)", otp_type.value, email, settings.otp_expire_minutes)
    return otp


def get_live(db: Session, email: str, otp_type: OtpType) -> OTP | None:
    return (
        db.query(OTP)
        .filter(
            OTP.email == normalize_email(email),
            OTP.type == otp_type,
            OTP.expires_at > datetime.now(timezone.utc),
        )
        .order_by(OTP.id.desc())
        .first()
    )


def verify(db: Session, email: str, code: str, otp_type: OtpType) -> None:
    """Consume the live code for (email, type) or raise.

    A record that has used up its attempts stays locked (every call fails with
    OtpAttemptsExceeded) until it expires or a new code is issued.

    Every guess first reserves an attempt with a conditional UPDATE, so parallel
    requests can never compare more than max_attempts codes; the consuming DELETE
    must remove exactly one row, so a code is accepted at most once.
    """
    otp = get_live(db, email, otp_type)
    if not otp:
        raise OtpExpiredOrMissing()
    otp_id, stored_code = otp.id, otp.code

    reserved = (
        db.query(OTP)
        .filter(
            OTP.id == otp_id,
            OTP.attempts < OTP.max_attempts,
            OTP.expires_at > datetime.now(timezone.utc),
        )
        .update({OTP.attempts: OTP.attempts + 1}, synchronize_session=False)
    )
    db.commit()
    if reserved != 1:
        row = db.query(OTP.attempts, OTP.max_attempts).filter(OTP.id == otp_id).first()
        if row is not None and row.attempts >= row.max_attempts:
            raise OtpAttemptsExceeded()
        # consumed, superseded or expired since the lookup
        raise OtpExpiredOrMissing()

    supplied = (code or "").strip().encode("utf-8")
    if not secrets.compare_digest(stored_code.encode("utf-8"), supplied):
        raise OtpMismatch()

    consumed = db.query(OTP).filter(OTP.id == otp_id).delete(synchronize_session=False)
    db.commit()
    if consumed != 1:
        raise OtpExpiredOrMissing()


def discard(db: Session, otp: OTP) -> None:
    """Drop a code that could not be delivered."""
    db.query(OTP).filter(OTP.id == otp.id).delete(synchronize_session=False)
    db.commit()


def purge_expired(db: Session) -> int:
    deleted = (
        db.query(OTP)
        .filter(OTP.expires_at <= datetime.now(timezone.utc))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
