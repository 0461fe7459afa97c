from decimal import Decimal

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from budget_api.models.goal import Goal
from budget_api.services.budget_service import to_money


def progress(goal: Goal) -> float:
    target = to_money(goal.target_amount)
    if target <= 0:
        return 100.0
    return round(min(float(to_money(goal.current_amount) / target * 100), 100.0), 2)


def describe(goal: Goal) -> dict:
    return {
        "id": goal.id,
        "user_id": goal.user_id,
        "name": goal.name,
        "target_amount": to_money(goal.target_amount),
        "current_amount": to_money(goal.current_amount),
        "deadline": goal.deadline,
        "icon": goal.icon,
        "color": goal.color,
        "is_completed": goal.is_completed,
        "progress": progress(goal),
        "created_at": goal.created_at,
        "updated_at": goal.updated_at,
    }


def apply_changes(goal: Goal, changes: dict) -> None:
    for field, value in changes.items():
        setattr(goal, field, value)
    goal.is_completed = to_money(goal.current_amount) >= to_money(goal.target_amount)


def add_funds(db: Session, goal: Goal, amount: Decimal) -> Goal:
    """Increment current_amount in a single UPDATE so concurrent calls can't lose funds.

    The caller must already have checked ownership; the owner filter is repeated
    in the WHERE clause anyway.
    """
    # Rounded to cents so float-backed NUMERIC (SQLite) can't miss the target by a hair
    new_total = func.round(Goal.current_amount + amount, 2)
    stmt = (
        update(Goal)
        .where(Goal.id == goal.id, Goal.user_id == goal.user_id)
        .values(current_amount=new_total, is_completed=new_total >= Goal.target_amount)
        .execution_options(synchronize_session=False)
    )
    db.execute(stmt)
    db.commit()
    db.refresh(goal)
    return goal
