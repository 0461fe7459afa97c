from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from budget_api.models.budget import Budget
from budget_api.models.transaction import Transaction

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def period_window(period: str, day: date) -> Tuple[date, date]:
    """Return [start, end) of the weekly/monthly/yearly period containing day."""
    if period == "weekly":
        start = day - timedelta(days=day.weekday())
        return start, start + timedelta(days=7)
    if period == "monthly":
        start = day.replace(day=1)
        if start.month == 12:
            return start, date(start.year + 1, 1, 1)
        return start, date(start.year, start.month + 1, 1)
    if period == "yearly":
        start = date(day.year, 1, 1)
        return start, date(day.year + 1, 1, 1)
    raise ValueError(f"Unknown budget period: {period}")


def month_window(month: str) -> Tuple[date, date]:
    """Window for a 'YYYY-MM' string."""
    first = datetime.strptime(month + "-01", "%Y-%m-%d").date()
    return period_window("monthly", first)


def _clip(budget: Budget, start: date, end: date) -> Optional[Tuple[date, date]]:
    """Intersect a window with the budget's active range; None if they don't overlap."""
    active_start = budget.start_date.date()
    active_end = budget.end_date.date() + timedelta(days=1) if budget.end_date else None

    lo = max(start, active_start)
    hi = min(end, active_end) if active_end else end
    if lo >= hi:
        return None
    return lo, hi


class BudgetService:
    def spent_between(self, db: Session, budget: Budget, start: date, end: date) -> Decimal:
        query = db.query(func.sum(Transaction.amount)).filter(
            Transaction.user_id == budget.user_id,
            Transaction.type == "expense",
            Transaction.date >= datetime.combine(start, time.min),
            Transaction.date < datetime.combine(end, time.min),
        )
        if budget.category_id is not None:
            query = query.filter(Transaction.category_id == budget.category_id)
        return to_money(query.scalar())

    def spent(self, db: Session, budget: Budget, today: Optional[date] = None) -> Decimal:
        window = _clip(budget, *period_window(budget.period, today or date.today()))
        if window is None:
            return ZERO
        return self.spent_between(db, budget, *window)

    def carried_over(self, db: Session, budget: Budget, period_start: date) -> Decimal:
        """Unused allowance from the previous period, if rollover is on."""
        if not budget.rollover:
            return ZERO
        previous = _clip(budget, *period_window(budget.period, period_start - timedelta(days=1)))
        if previous is None:
            return ZERO
        leftover = to_money(budget.amount) - self.spent_between(db, budget, *previous)
        return max(leftover, ZERO)

    def describe(self, db: Session, budget: Budget, today: Optional[date] = None) -> dict:
        today = today or date.today()
        period_start, period_end = period_window(budget.period, today)

        spent = self.spent(db, budget, today)
        available = to_money(budget.amount) + self.carried_over(db, budget, period_start)
        if available > 0:
            percent = min(float(spent / available * 100), 100.0)
        else:
            percent = 100.0 if spent > 0 else 0.0

        return {
            "id": budget.id,
            "user_id": budget.user_id,
            "category_id": budget.category_id,
            "name": budget.name,
            "amount": to_money(budget.amount),
            "period": budget.period,
            "start_date": budget.start_date,
            "end_date": budget.end_date,
            "rollover": budget.rollover,
            "created_at": budget.created_at,
            "updated_at": budget.updated_at,
            "spent": spent,
            "available": available,
            "remaining": available - spent,
            "percent_used": round(percent, 2),
            "period_start": period_start,
            # Inclusive last day for display
            "period_end": period_end - timedelta(days=1),
        }


budget_service = BudgetService()
