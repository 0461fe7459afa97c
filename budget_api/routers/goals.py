from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from budget_api.core.security import get_current_user_id
from budget_api.db.session import get_db
from budget_api.models.goal import Goal
from budget_api.schemas.common import Message
from budget_api.schemas.goal import AddFunds, GoalCreate, GoalOut, GoalUpdate
from budget_api.services import goal_service
from budget_api.services.ownership import get_owned_or_404

router = APIRouter(prefix="/api/goals", tags=["goals"])


@router.get("", response_model=List[GoalOut])
def list_goals(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    goals = db.query(Goal).filter(Goal.user_id == user_id).order_by(Goal.created_at.desc()).all()
    return [goal_service.describe(g) for g in goals]


@router.post("", response_model=GoalOut)
def create_goal(payload: GoalCreate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    data = payload.model_dump()
    if data["current_amount"] is None:
        data["current_amount"] = 0

    goal = Goal(user_id=user_id)
    goal_service.apply_changes(goal, data)
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal_service.describe(goal)


@router.get("/{goal_id}", response_model=GoalOut)
def get_goal(goal_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return goal_service.describe(get_owned_or_404(db, Goal, goal_id, user_id))


@router.patch("/{goal_id}", response_model=GoalOut)
def update_goal(goal_id: str, payload: GoalUpdate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    goal = get_owned_or_404(db, Goal, goal_id, user_id)
    goal_service.apply_changes(goal, payload.changes())
    db.commit()
    db.refresh(goal)
    return goal_service.describe(goal)


@router.post("/{goal_id}/add-funds", response_model=GoalOut)
def add_funds(goal_id: str, payload: AddFunds, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    goal = get_owned_or_404(db, Goal, goal_id, user_id)
    return goal_service.describe(goal_service.add_funds(db, goal, payload.amount))


@router.delete("/{goal_id}", response_model=Message)
def delete_goal(goal_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    goal = get_owned_or_404(db, Goal, goal_id, user_id)
    db.delete(goal)
    db.commit()
    return {"success": True}
