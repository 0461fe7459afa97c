from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from budget_api.core.security import get_current_user_id
from budget_api.db.session import get_db
from budget_api.models.budget import Budget
from budget_api.models.category import Category
from budget_api.models.transaction import Transaction
from budget_api.schemas.analytics import MonthlyTotals, Summary
from budget_api.services.budget_service import ZERO, budget_service, month_window, to_money

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


def _month_key(value) -> str:
    return f"{value.year:04d}-{value.month:02d}"


@router.get("/summary", response_model=Summary)
def summary(
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM, defaults to the current month"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    today = date.today()
    month = month or _month_key(today)
    try:
        start, end = month_window(month)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format. Use YYYY-MM")

    in_month = (
        Transaction.user_id == user_id,
        Transaction.date >= datetime.combine(start, time.min),
        Transaction.date < datetime.combine(end, time.min),
    )

    # 1. Income / expense totals
    totals = dict(
        db.query(Transaction.type, func.sum(Transaction.amount))
        .filter(*in_month)
        .group_by(Transaction.type)
        .all()
    )
    income = to_money(totals.get("income"))
    expenses = to_money(totals.get("expense"))

    # 2. Expense breakdown per category (uncategorized rows grouped together)
    rows = (
        db.query(Transaction.category_id, Category.name, Category.color, func.sum(Transaction.amount))
        .outerjoin(Category, Category.id == Transaction.category_id)
        .filter(*in_month, Transaction.type == "expense")
        .group_by(Transaction.category_id, Category.name, Category.color)
        .order_by(func.sum(Transaction.amount).desc())
        .all()
    )
    spending = [
        {"category_id": cid, "name": name or "Uncategorized", "color": color, "amount": to_money(total)}
        for cid, name, color, total in rows
        if to_money(total) > ZERO
    ]

    # 3. Budget progress, measured on the last day of a past month
    reference_day = today if start <= today < end else end - timedelta(days=1)
    budgets = db.query(Budget).filter(Budget.user_id == user_id).order_by(Budget.created_at.desc()).all()

    return {
        "month": month,
        "income": income,
        "expenses": expenses,
        "balance": income - expenses,
        "spending_by_category": spending,
        "budgets": [budget_service.describe(db, b, reference_day) for b in budgets],
    }


@router.get("/monthly", response_model=List[MonthlyTotals])
def monthly(
    months: int = Query(6, ge=1, le=24),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Income vs expenses for the last `months` calendar months, oldest first. Empty months report zero."""
    first = date.today().replace(day=1)
    keys = []
    for _ in range(months):
        keys.append(_month_key(first))
        first = (first - timedelta(days=1)).replace(day=1)
    keys.reverse()
    window_start, _ = month_window(keys[0])

    buckets = {key: {"income": ZERO, "expense": ZERO} for key in keys}
    rows = (
        db.query(Transaction.date, Transaction.type, Transaction.amount)
        .filter(Transaction.user_id == user_id, Transaction.date >= datetime.combine(window_start, time.min))
        .all()
    )
    for tx_date, tx_type, amount in rows:
        bucket = buckets.get(_month_key(tx_date))
        if bucket is not None and tx_type in bucket:
            bucket[tx_type] += to_money(amount)

    return [{"month": key, "income": buckets[key]["income"], "expenses": buckets[key]["expense"]} for key in keys]
