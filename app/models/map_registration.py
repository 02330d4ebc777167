"""Territory map: one opt-in location marker per user."""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func

from app.database import Base
from app.models.user import UserRole


class MapRegistration(Base):
    __tablename__ = "map_registrations"

    id = Column(Integer, primary_key=True, index=True)
    # unique: re-registering updates the existing row
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Snapshot of the user at registration time, shown in map popups
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False)

    address = Column(String(500), nullable=False)
    pincode = Column(String(20), nullable=False, index=True)
    locality = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
