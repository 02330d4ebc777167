"""
Create one verified, active demo account per dashboard role (no email OTP needed).
Use when Mailgun is not configured so you can log in and click through the app.

Run from project root:
  python scripts/create_test_users.py

Credentials are printed at the end. Existing accounts are left untouched.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import Base, SessionLocal, engine
from app.models import User  # noqa: F401  (registers all tables)
from app.models.user import UserRole, UserStatus
from app.services.auth import get_password_hash

PASSWORD = "Password123!"

DEMO_USERS = [
    ("Demo Super Admin", "superadmin@estatehub.demo", UserRole.superadmin, None),
    ("Demo Admin", "admin@estatehub.demo", UserRole.admin, None),
    ("Demo Customer", "customer@estatehub.demo", UserRole.customer, None),
    ("Demo Investor", "investor@estatehub.demo", UserRole.investor, None),
    ("Demo Partner", "partner@estatehub.demo", UserRole.partner, None),
    ("Demo Vendor", "vendor@estatehub.demo", UserRole.vendor, "RERA-DEMO-V1"),
    ("Demo Broker", "broker@estatehub.demo", UserRole.broker, "RERA-DEMO-B1"),
]


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for name, email, role, rera_id in DEMO_USERS:
            if db.query(User).filter(User.email == email).first():
                print(f"Already exists: {email}")
                continue
            db.add(User(
                name=name,
                email=email,
                hashed_password=get_password_hash(PASSWORD),
                role=role,
                status=UserStatus.active,
                verified=True,
                is_email_verified=True,
                is_rera_verified=bool(rera_id),
                rera_id=rera_id,
            ))
            print(f"Created {role.value}: {email}")
        db.commit()
    finally:
        db.close()
    print(f"\nAll demo accounts use password: {PASSWORD}")


if __name__ == "__main__":
    main()
