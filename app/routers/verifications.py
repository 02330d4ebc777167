"""Vendor/broker applications: public submission, admin review."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, require_admin
from app.models.verification import VerificationStatus
from app.schemas.verification import (
    ApprovalResponse,
    ApprovedUser,
    RejectionResponse,
    RejectRequest,
    VerificationCreate,
    VerificationResponse,
)
from app.services import verification as verification_service

router = APIRouter(prefix="/api/verifications", tags=["verifications"])


@router.post("", response_model=VerificationResponse, status_code=201)
def submit_application(data: VerificationCreate, db: Session = Depends(get_db)):
    return verification_service.submit(
        db,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
        rera_id=data.rera_id,
        phone=data.phone,
        company=data.company,
    )


@router.get("", response_model=list[VerificationResponse])
def list_applications(
    status: VerificationStatus | None = Query(None, description="pending, approved or rejected"),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return verification_service.list_verifications(db, status)


@router.get("/{verification_id}", response_model=VerificationResponse)
def get_application(
    verification_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    return verification_service.get_verification(db, verification_id)


@router.post("/{verification_id}/approve", response_model=ApprovalResponse)
def approve_application(
    verification_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    decision = verification_service.approve(db, verification_id, session.user_id)
    return ApprovalResponse(
        message="Verification approved and user account created successfully",
        user=ApprovedUser.model_validate(decision.user),
        email_sent=decision.email_sent,
    )


@router.post("/{verification_id}/reject", response_model=RejectionResponse)
def reject_application(
    verification_id: int,
    data: RejectRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    decision = verification_service.reject(db, verification_id, session.user_id, data.reason)
    return RejectionResponse(message="Verification rejected successfully", email_sent=decision.email_sent)
