"""
Delete the user with the given email and everything they own (documents, transactions,
notifications, map registration). Verification history is kept.
Usage: python scripts/delete_users_by_email.py <email> [<email> ...]
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import SessionLocal
from app.models.map_registration import MapRegistration
from app.models.otp import OTP
from app.models.records import Document, Notification, Transaction
from app.models.user import User
from app.models.verification import Verification


def main():
    emails = [e.strip().lower() for e in sys.argv[1:] if e.strip()]
    if not emails:
        print("Usage: python scripts/delete_users_by_email.py <email> [<email> ...]")
        sys.exit(1)

    db = SessionLocal()
    try:
        deleted = 0
        for email in emails:
            user = db.query(User).filter(User.email == email).first()
            db.query(OTP).filter(OTP.email == email).delete(synchronize_session=False)
            if not user:
                print(f"No user found with email: {email}")
                continue
            uid = user.id
            for model in (Document, Transaction, Notification, MapRegistration):
                db.query(model).filter(model.user_id == uid).delete(synchronize_session=False)
            db.query(Verification).filter(Verification.reviewed_by == uid).update(
                {Verification.reviewed_by: None}, synchronize_session=False
            )
            db.delete(user)
            deleted += 1
            print(f"Deleted user: {email} (role={user.role.value}, id={uid})")
        db.commit()
        print(f"Done. Deleted {deleted} user(s).")
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
