"""Shared dependencies: DB session, session context, role tier guards."""
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthenticationRequired, AuthorizationDenied
from app.models.user import AccessTier, User, UserRole, UserStatus, role_has_tier
from app.services.auth import user_id_from_token

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """Who is making the request. Built once per request and handed to handlers."""
    user_id: int
    role: UserRole
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


def resolve_token(db: Session, token: str | None) -> SessionContext:
    """Bearer token to SessionContext; shared by HTTP routes and the websocket."""
    if not token:
        raise AuthenticationRequired()
    user_id = user_id_from_token(token)
    if user_id is None:
        raise AuthenticationRequired("Invalid or expired session")
    # Always re-read: role and status changes take effect on the next request
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationRequired("Session user no longer exists")
    if user.status == UserStatus.inactive:
        raise AuthorizationDenied("Account is inactive")
    return SessionContext(user_id=user.id, role=user.role, email=user.email)


def _resolve_session(
    db: Session,
    credentials: HTTPAuthorizationCredentials | None,
) -> SessionContext:
    return resolve_token(db, credentials.credentials if credentials else None)


def require_tier(tier: AccessTier):
    """Dependency factory: 401 without a valid session, 403 if the role lacks `tier`."""
    messages = {
        AccessTier.authenticated: "Access denied",
        AccessTier.admin: "Admin access required",
        AccessTier.superadmin: "Super Admin access required",
    }

    def dependency(
        db: Session = Depends(get_db),
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
    ) -> SessionContext:
        session = _resolve_session(db, credentials)
        if not role_has_tier(session.role, tier):
            raise AuthorizationDenied(messages[tier])
        return session

    dependency.__name__ = f"require_{tier.value}"
    return dependency


get_session_context = require_tier(AccessTier.authenticated)
require_admin = require_tier(AccessTier.admin)
require_superadmin = require_tier(AccessTier.superadmin)


def ensure_owner_or_admin(session: SessionContext, target_user_id: int) -> None:
    """Ownership rule for per-user resources: the owner, or a caller whose role is admin."""
    if session.user_id != target_user_id and not session.is_admin:
        raise AuthorizationDenied("Access denied")
