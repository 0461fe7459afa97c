from datetime import datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budget_api.core.security import get_current_user_id
from budget_api.db.session import get_db
from budget_api.models.transaction import Transaction
from budget_api.schemas.common import Kind, Message
from budget_api.schemas.transaction import TransactionCreate, TransactionOut, TransactionUpdate
from budget_api.services.budget_service import month_window
from budget_api.services.ownership import check_category, get_owned_or_404

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionOut])
def list_transactions(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM"),
    type: Optional[Kind] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    query = db.query(Transaction).filter(Transaction.user_id == user_id)
    if month:
        try:
            start, end = month_window(month)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid month format. Use YYYY-MM")
        query = query.filter(
            Transaction.date >= datetime.combine(start, time.min),
            Transaction.date < datetime.combine(end, time.min),
        )
    if type:
        query = query.filter(Transaction.type == type)
    if category_id:
        query = query.filter(Transaction.category_id == category_id)
    return query.order_by(Transaction.date.desc()).all()


@router.post("", response_model=TransactionOut)
def create_transaction(payload: TransactionCreate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    check_category(db, payload.category_id, user_id, payload.type)

    transaction = Transaction(user_id=user_id, **payload.model_dump())
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return transaction


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return get_owned_or_404(db, Transaction, transaction_id, user_id)


@router.patch("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    transaction = get_owned_or_404(db, Transaction, transaction_id, user_id)
    changes = payload.changes()

    # Re-check the category against the type the record will end up with
    category_id = changes.get("category_id", transaction.category_id)
    check_category(db, category_id, user_id, changes.get("type", transaction.type))

    is_recurring = changes.get("is_recurring", transaction.is_recurring)
    if is_recurring and changes.get("recurring_frequency", transaction.recurring_frequency) is None:
        raise HTTPException(status_code=400, detail="recurringFrequency is required for recurring transactions")

    for field, value in changes.items():
        setattr(transaction, field, value)
    db.commit()
    db.refresh(transaction)
    return transaction


@router.delete("/{transaction_id}", response_model=Message)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    transaction = get_owned_or_404(db, Transaction, transaction_id, user_id)
    db.delete(transaction)
    db.commit()
    return {"success": True}
