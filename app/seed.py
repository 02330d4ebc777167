"""Bootstrap super admin from SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD."""
import logging

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User, UserRole, UserStatus
from app.services.auth import get_password_hash
from app.services.otp import normalize_email


def seed_superadmin(db: Session) -> User | None:
    """Create the configured super admin, or promote the account if it already exists.
    Does nothing when the settings are blank. An existing password is never overwritten."""
    settings = get_settings()
    email = normalize_email(settings.superadmin_email)
    if not email or not settings.superadmin_password:
        return None
    user = db.query(User).filter(User.email == email).first()
    if user:
        if user.role == UserRole.superadmin:
            return user
        user.role = UserRole.superadmin
    else:
        user = User(
            name=settings.superadmin_name or "Super Admin",
            email=email,
            hashed_password=get_password_hash(settings.superadmin_password),
            role=UserRole.superadmin,
        )
        db.add(user)
    user.status = UserStatus.active
    user.verified = True
    user.is_email_verified = True
    db.commit()
    db.refresh(user)
    logging.getLogger("uvicorn.error").info("Seed: super admin ready (%s)", email)
    return user
