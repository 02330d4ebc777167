"""User administration."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, ensure_owner_or_admin, get_session_context, require_admin
from app.errors import AuthorizationDenied, NotFound, ValidationError
from app.models.map_registration import MapRegistration
from app.models.records import Document, Notification, Transaction
from app.models.user import PRIVILEGED_ROLES, AccessTier, User, UserRole, role_has_tier
from app.models.verification import Verification
from app.schemas.base import MessageResponse
from app.schemas.user import AssignRoleRequest, AssignRoleResponse, UserAdminUpdate, UserResponse
from app.services.otp import normalize_email

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def ensure_can_set_role(session: SessionContext, user: User, role: UserRole) -> None:
    """Granting or taking away admin/superadmin is for super admins only."""
    if role == user.role:
        return
    if (role in PRIVILEGED_ROLES or user.role in PRIVILEGED_ROLES) and not role_has_tier(
        session.role, AccessTier.superadmin
    ):
        raise AuthorizationDenied("Super Admin access required to change admin roles")


@router.get("", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return db.query(User).order_by(User.id).all()


@router.post("/admin", response_model=AssignRoleResponse)
def assign_role(
    data: AssignRoleRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    """Give an existing (already signed up) account a new role."""
    user = db.query(User).filter(User.email == normalize_email(data.email)).first()
    if not user:
        raise NotFound("User not found. User must sign up first.")
    ensure_can_set_role(session, user, data.role)
    user.role = data.role
    db.commit()
    db.refresh(user)
    log.info("[Users] User %s assigned role %s by %s", user.id, data.role.value, session.user_id)
    return AssignRoleResponse(
        message=f"{data.role.value} role assigned successfully",
        user=UserResponse.model_validate(user),
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    user = get_user_or_404(db, user_id)
    ensure_owner_or_admin(session, user_id)
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    data: UserAdminUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    user = get_user_or_404(db, user_id)
    if data.role:
        ensure_can_set_role(session, user, data.role)
        user.role = data.role
    if data.status:
        user.status = data.status
    if data.name:
        if not data.name.strip():
            raise ValidationError("Name cannot be empty")
        user.name = data.name.strip()
    if data.phone:
        user.phone = data.phone.strip()
    if data.company:
        user.company = data.company.strip()
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    user = get_user_or_404(db, user_id)
    # Owned rows go with the account; review history keeps the verification rows
    for model in (Document, Transaction, Notification, MapRegistration):
        db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)
    db.query(Verification).filter(Verification.reviewed_by == user_id).update(
        {Verification.reviewed_by: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
    log.info("[Users] User %s deleted by %s", user_id, session.user_id)
    return MessageResponse(message="User deleted successfully")
