"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from app.models.user import User
from app.models.verification import Verification
from app.models.otp import OTP
from app.models.records import Document, Transaction, Notification
from app.models.map_registration import MapRegistration

__all__ = [
    "User",
    "Verification",
    "OTP",
    "Document",
    "Transaction",
    "Notification",
    "MapRegistration",
]
