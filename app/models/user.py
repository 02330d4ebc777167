"""Users, roles and the role -> access tier capability table."""
from sqlalchemy import Column, Integer, String, Enum as SQLEnum, DateTime, Boolean
from sqlalchemy.sql import func
from app.database import Base
import enum


class UserRole(str, enum.Enum):
    superadmin = "superadmin"
    admin = "admin"
    customer = "customer"
    investor = "investor"
    vendor = "vendor"
    broker = "broker"
    user = "user"
    partner = "partner"


class UserStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    pending = "pending"


class AccessTier(str, enum.Enum):
    """Route guard tiers. A route declares one tier; a role either holds it or not."""
    authenticated = "authenticated"
    admin = "admin"
    superadmin = "superadmin"


_ALL = frozenset({AccessTier.authenticated})
_ADMIN = frozenset({AccessTier.authenticated, AccessTier.admin})
_SUPERADMIN = frozenset({AccessTier.authenticated, AccessTier.admin, AccessTier.superadmin})

# Adding a role means adding one row here; the guards never compare role strings.
ROLE_TIERS: dict[UserRole, frozenset[AccessTier]] = {
    UserRole.superadmin: _SUPERADMIN,
    UserRole.admin: _ADMIN,
    UserRole.customer: _ALL,
    UserRole.investor: _ALL,
    UserRole.vendor: _ALL,
    UserRole.broker: _ALL,
    UserRole.user: _ALL,
    UserRole.partner: _ALL,
}

# Roles that must go through RERA verification instead of direct signup
PROFESSIONAL_ROLES = frozenset({UserRole.vendor, UserRole.broker})
# Roles nobody can pick at signup
PRIVILEGED_ROLES = frozenset({UserRole.admin, UserRole.superadmin})


def role_has_tier(role: UserRole, tier: AccessTier) -> bool:
    return tier in ROLE_TIERS.get(role, frozenset())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.customer)
    status = Column(SQLEnum(UserStatus), nullable=False, default=UserStatus.pending)

    verified = Column(Boolean, default=False, nullable=False)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    is_rera_verified = Column(Boolean, default=False, nullable=False)
    # Real-estate regulatory licence; only vendors and brokers carry one
    rera_id = Column(String(100), nullable=True)

    avatar = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    company = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
