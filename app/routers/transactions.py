"""Payment transactions."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, ensure_owner_or_admin, get_session_context, require_admin
from app.errors import NotFound
from app.models.records import Transaction, TransactionStatus
from app.schemas.records import TransactionCreate, TransactionResponse, TransactionUpdate

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("/{user_id}", response_model=list[TransactionResponse])
def list_transactions(
    user_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    ensure_owner_or_admin(session, user_id)
    return (
        db.query(Transaction)
        .filter(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .all()
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def create_transaction(
    data: TransactionCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    """Record a payment attempt for the caller; it starts pending until the gateway confirms."""
    txn = Transaction(
        user_id=session.user_id,
        amount=data.amount,
        method=data.method,
        description=data.description,
        transaction_id=data.transaction_id,
        status=TransactionStatus.pending,
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not txn:
        raise NotFound("Transaction not found")
    if data.status:
        txn.status = data.status
    if data.description is not None:
        txn.description = data.description
    if data.transaction_id is not None:
        txn.transaction_id = data.transaction_id
    db.commit()
    db.refresh(txn)
    return txn
