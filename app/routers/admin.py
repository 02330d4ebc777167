"""Admin and super admin dashboards."""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, require_admin, require_superadmin
from app.errors import NotFound, ValidationError
from app.models.user import PRIVILEGED_ROLES, User, UserRole, UserStatus
from app.schemas.stats import AdminStats, Analytics, SuperAdminStats
from app.schemas.user import AssignRoleRequest, AssignRoleResponse, UserResponse
from app.services import stats as stats_service
from app.services.otp import normalize_email

log = logging.getLogger("uvicorn.error")

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])
superadmin_router = APIRouter(prefix="/api/superadmin", tags=["superadmin"])


@admin_router.get("/stats", response_model=AdminStats)
def admin_stats(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return stats_service.admin_stats(db)


@admin_router.get("/analytics", response_model=Analytics)
def admin_analytics(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return stats_service.analytics(db)


@superadmin_router.get("/stats", response_model=SuperAdminStats)
def superadmin_stats(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_superadmin),
):
    return stats_service.superadmin_stats(db)


@superadmin_router.get("/users/by-role", response_model=list[UserResponse])
def users_by_role(
    role: UserRole | None = Query(None),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_superadmin),
):
    q = db.query(User)
    if role:
        q = q.filter(User.role == role)
    return q.order_by(User.id).all()


@superadmin_router.post("/create-admin", response_model=AssignRoleResponse)
def create_admin(
    data: AssignRoleRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_superadmin),
):
    """Promote an existing account to admin or superadmin."""
    if data.role not in PRIVILEGED_ROLES:
        raise ValidationError("Invalid role. Must be admin or superadmin")
    user = db.query(User).filter(User.email == normalize_email(data.email)).first()
    if not user:
        raise NotFound("User not found. User must sign up first.")
    user.role = data.role
    user.status = UserStatus.active
    user.verified = True
    db.commit()
    db.refresh(user)
    log.info("[Admin] User %s promoted to %s by %s", user.id, data.role.value, session.user_id)
    return AssignRoleResponse(
        message=f"{data.role.value} role assigned successfully",
        user=UserResponse.model_validate(user),
    )
