"""User documents (metadata; files live in external storage)."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, ensure_owner_or_admin, get_session_context, require_admin
from app.errors import NotFound
from app.models.records import Document, DocumentStatus, NotificationType
from app.schemas.base import MessageResponse
from app.schemas.records import DocumentCreate, DocumentResponse, DocumentStatusUpdate
from app.services.notifications import add_notification, push_notification

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _get_document(db: Session, document_id: int) -> Document:
    doc = db.query(Document).filter(Document.id == document_id).first()
    if not doc:
        raise NotFound("Document not found")
    return doc


@router.get("/{user_id}", response_model=list[DocumentResponse])
def list_documents(
    user_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    ensure_owner_or_admin(session, user_id)
    return (
        db.query(Document)
        .filter(Document.user_id == user_id)
        .order_by(Document.uploaded_at.desc(), Document.id.desc())
        .all()
    )


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    doc = Document(
        user_id=session.user_id,
        name=data.name,
        type=data.type,
        size=data.size,
        url=data.url,
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)
    return doc


@router.patch("/{document_id}/status", response_model=DocumentResponse)
def set_document_status(
    document_id: int,
    data: DocumentStatusUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    """Admin review: verify or reject a document. The owner is notified."""
    doc = _get_document(db, document_id)
    doc.status = data.status
    notification = add_notification(
        db,
        doc.user_id,
        f"Document {data.status.value}",
        f'Your document "{doc.name}" is now {data.status.value}.',
        NotificationType.warning if data.status == DocumentStatus.rejected else NotificationType.info,
    )
    db.commit()
    db.refresh(doc)
    push_notification(notification)
    return doc


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    doc = _get_document(db, document_id)
    ensure_owner_or_admin(session, doc.user_id)
    db.delete(doc)
    db.commit()
    return MessageResponse(message="Document deleted successfully")
