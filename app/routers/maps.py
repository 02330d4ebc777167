"""Territory map: user location registrations and pincode lookups."""
import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, get_session_context
from app.errors import NotFound, ValidationError
from app.models.map_registration import MapRegistration
from app.models.user import User
from app.schemas.map import (
    BoundaryResponse,
    GeocodeResponse,
    MapRegisterRequest,
    MapRegistrationResponse,
    PincodeInfo,
    RegistrationStatus,
)
from app.services import geo, pincodes

log = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/map", tags=["map"])


def _apply(reg: MapRegistration, user: User, data: MapRegisterRequest, lat: float | None, lng: float | None) -> None:
    reg.name = user.name
    reg.email = user.email
    reg.role = user.role
    reg.address = data.address
    reg.pincode = data.pincode
    reg.locality = (data.locality or "").strip() or None
    reg.latitude = lat
    reg.longitude = lng


@router.get("/check-registration", response_model=RegistrationStatus)
def check_registration(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    reg = db.query(MapRegistration).filter(MapRegistration.user_id == session.user_id).first()
    return RegistrationStatus(
        registered=reg is not None,
        registration=MapRegistrationResponse.model_validate(reg) if reg else None,
    )


@router.post("/register", response_model=MapRegistrationResponse)
def register(
    data: MapRegisterRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    """Create or replace the caller's marker. One registration per user."""
    user = db.query(User).filter(User.id == session.user_id).first()
    lat, lng = data.latitude, data.longitude
    if (lat is None) != (lng is None):
        raise ValidationError("Provide both latitude and longitude, or neither")
    if lat is None:
        try:
            point = geo.geocode(data.address, data.pincode)
            lat, lng = point.latitude, point.longitude
        except NotFound:
            log.info("[Map] No coordinates for user %s at pincode %s; stored without marker", user.id, data.pincode)

    reg = db.query(MapRegistration).filter(MapRegistration.user_id == user.id).first()
    if reg is None:
        reg = MapRegistration(user_id=user.id)
        db.add(reg)
    _apply(reg, user, data, lat, lng)
    try:
        db.commit()
    except IntegrityError:
        # a parallel request inserted first; update that row instead
        db.rollback()
        reg = db.query(MapRegistration).filter(MapRegistration.user_id == user.id).one()
        _apply(reg, user, data, lat, lng)
        db.commit()
    db.refresh(reg)
    return reg


@router.get("/registrations", response_model=list[MapRegistrationResponse])
def list_registrations(
    pincode: str | None = Query(None, description="Exact pincode match"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    q = db.query(MapRegistration)
    if pincode:
        q = q.filter(MapRegistration.pincode == pincode.strip())
    return q.order_by(MapRegistration.id).all()


@router.get("/pincodes", response_model=list[PincodeInfo])
def list_pincodes(session: SessionContext = Depends(get_session_context)):
    return [
        PincodeInfo(pincode=code, name=entry["name"], center=entry["center"])
        for code, entry in sorted(pincodes.PINCODES.items())
    ]


@router.get("/boundary/{pincode}", response_model=BoundaryResponse)
def get_boundary(pincode: str, session: SessionContext = Depends(get_session_context)):
    b = geo.boundary(pincode)
    return BoundaryResponse(
        pincode=b.pincode,
        name=b.name,
        center=b.center,
        coordinates=b.coordinates,
        source=b.source,
    )


@router.get("/geocode", response_model=GeocodeResponse)
def geocode(
    address: str | None = Query(None),
    pincode: str | None = Query(None),
    session: SessionContext = Depends(get_session_context),
):
    if not (address or pincode):
        raise ValidationError("address or pincode is required")
    point = geo.geocode(address, pincode)
    return GeocodeResponse(latitude=point.latitude, longitude=point.longitude, source=point.source)
