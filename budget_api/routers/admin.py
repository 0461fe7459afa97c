from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from budget_api.core.security import get_identity_provider, require_admin
from budget_api.db.session import get_db
from budget_api.models.user import User
from budget_api.schemas.admin import AdminFlag, AdminLogOut, DisabledFlag, ResetLinkOut, SystemStats
from budget_api.schemas.common import Message
from budget_api.schemas.user import UserOut
from budget_api.services.admin_service import admin_service
from budget_api.services.identity import IdentityProvider

# Every route in here goes through the admin gate
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=List[UserOut])
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.list_users(db)


@router.patch("/users/{user_id}/admin", response_model=UserOut)
def set_admin(user_id: str, payload: AdminFlag, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.set_admin(db, admin, user_id, payload.is_admin)


@router.patch("/users/{user_id}/disable", response_model=UserOut)
def set_disabled(user_id: str, payload: DisabledFlag, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.set_disabled(db, admin, user_id, payload.is_disabled)


@router.delete("/users/{user_id}", response_model=Message)
def delete_user(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    admin_service.delete_user(db, admin, user_id)
    return {"success": True}


@router.post("/users/{user_id}/reset-password", response_model=ResetLinkOut)
def reset_password(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    return admin_service.reset_password(db, identity, admin, user_id)


@router.get("/logs", response_model=List[AdminLogOut])
def list_logs(limit: int = Query(50, ge=1, le=500), admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.list_logs(db, limit)


@router.get("/stats", response_model=SystemStats)
def stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return admin_service.stats(db)
