"""Scheduled removal of expired one-time codes."""
import logging

from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.services.otp import purge_expired

OTP_CLEANUP_INTERVAL_MINUTES = 30


def run_otp_cleanup_job() -> int:
    db: Session = SessionLocal()
    try:
        deleted = purge_expired(db)
        if deleted:
            logging.getLogger("uvicorn.error").info("OTP cleanup: deleted %d expired code(s).", deleted)
        return deleted
    finally:
        db.close()
