"""Territory map schemas."""
from datetime import datetime
from pydantic import field_validator

from app.models.user import UserRole
from app.schemas.base import APIModel


class MapRegisterRequest(APIModel):
    """Coordinates are optional; without them the address/pincode is geocoded."""
    address: str
    pincode: str
    locality: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @field_validator("address", "pincode")
    @classmethod
    def required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("latitude")
    @classmethod
    def lat_range(cls, v: float | None) -> float | None:
        if v is not None and not -90 <= v <= 90:
            raise ValueError("latitude must be between -90 and 90")
        return v

    @field_validator("longitude")
    @classmethod
    def lng_range(cls, v: float | None) -> float | None:
        if v is not None and not -180 <= v <= 180:
            raise ValueError("longitude must be between -180 and 180")
        return v


class MapRegistrationResponse(APIModel):
    id: int
    user_id: int
    name: str
    email: str
    role: UserRole
    address: str
    pincode: str
    locality: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RegistrationStatus(APIModel):
    registered: bool
    registration: MapRegistrationResponse | None = None


class BoundaryResponse(APIModel):
    pincode: str
    name: str | None = None
    center: list[float]
    # [[lat, lng], ...] outer ring
    coordinates: list[list[float]]
    source: str


class GeocodeResponse(APIModel):
    latitude: float
    longitude: float
    source: str


class PincodeInfo(APIModel):
    pincode: str
    name: str
    center: list[float]
