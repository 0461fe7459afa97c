from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from budget_api.core.config import settings
from budget_api.core.security import get_current_user_id, get_optional_claims
from budget_api.db.session import get_db
from budget_api.models.user import User
from budget_api.schemas.user import UserOut, UserSync
from budget_api.services.user_sync import sync_user

router = APIRouter(prefix="/api/users", tags=["users"])


# Token optional: called during the sign-in handshake; a token only matters for admin promotion
@router.post("/sync", response_model=UserOut)
def sync(payload: UserSync, claims: Optional[dict] = Depends(get_optional_claims), db: Session = Depends(get_db)):
    return sync_user(db, payload, settings.BOOTSTRAP_ADMIN_EMAILS, claims)


@router.get("/me", response_model=UserOut)
def me(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
