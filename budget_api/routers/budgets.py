from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from budget_api.core.security import get_current_user_id
from budget_api.db.session import get_db
from budget_api.models.budget import Budget
from budget_api.schemas.budget import BudgetCreate, BudgetOut, BudgetUpdate
from budget_api.schemas.common import Message
from budget_api.services.budget_service import budget_service
from budget_api.services.ownership import check_category, get_owned_or_404

router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@router.get("", response_model=List[BudgetOut])
def list_budgets(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    budgets = db.query(Budget).filter(Budget.user_id == user_id).order_by(Budget.created_at.desc()).all()
    return [budget_service.describe(db, b) for b in budgets]


@router.post("", response_model=BudgetOut)
def create_budget(payload: BudgetCreate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    # Budgets only make sense against expense categories
    check_category(db, payload.category_id, user_id, "expense")

    budget = Budget(user_id=user_id, **payload.model_dump())
    db.add(budget)
    db.commit()
    db.refresh(budget)
    return budget_service.describe(db, budget)


@router.get("/{budget_id}", response_model=BudgetOut)
def get_budget(budget_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    budget = get_owned_or_404(db, Budget, budget_id, user_id)
    return budget_service.describe(db, budget)


@router.patch("/{budget_id}", response_model=BudgetOut)
def update_budget(budget_id: str, payload: BudgetUpdate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    budget = get_owned_or_404(db, Budget, budget_id, user_id)
    changes = payload.changes()
    if "category_id" in changes:
        check_category(db, changes["category_id"], user_id, "expense")

    start = changes.get("start_date", budget.start_date)
    end = changes.get("end_date", budget.end_date)
    if end is not None and end.date() < start.date():
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")

    for field, value in changes.items():
        setattr(budget, field, value)
    db.commit()
    db.refresh(budget)
    return budget_service.describe(db, budget)


@router.delete("/{budget_id}", response_model=Message)
def delete_budget(budget_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    budget = get_owned_or_404(db, Budget, budget_id, user_id)
    db.delete(budget)
    db.commit()
    return {"success": True}
