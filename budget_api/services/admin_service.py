import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budget_api.models.admin_log import AdminLog
from budget_api.models.budget import Budget
from budget_api.models.transaction import Transaction
from budget_api.models.user import User
from budget_api.services.identity import IdentityError, IdentityProvider

logger = logging.getLogger(__name__)


class AdminService:
    """Privileged account operations.

    Every mutation commits first and then appends one AdminLog row in a
    separate commit. If the log write fails it is rolled back and reported,
    but the already-committed mutation stands.
    """

    def _log(self, db: Session, admin: User, action: str, target_id: str, target_email: str, details: str) -> None:
        entry = AdminLog(
            admin_id=admin.id,
            action=action,
            target_user_id=target_id,
            target_user_email=target_email,
            details=details,
        )
        try:
            db.add(entry)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to write admin log: admin=%s action=%s target=%s", admin.id, action, target_id)
            return
        logger.info("Admin %s: %s on %s (%s)", admin.id, action, target_id, target_email)

    def get_target(self, db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def _not_self(self, admin: User, target: User, what: str) -> None:
        if admin.id == target.id:
            raise HTTPException(status_code=400, detail=f"You cannot {what} your own account")

    def set_admin(self, db: Session, admin: User, user_id: str, is_admin: bool) -> User:
        target = self.get_target(db, user_id)
        if not is_admin:
            self._not_self(admin, target, "remove admin rights from")

        target.is_admin = is_admin
        db.commit()
        db.refresh(target)

        if is_admin:
            self._log(db, admin, "made_admin", target.id, target.email, f"Granted admin privileges to {target.email}")
        else:
            self._log(db, admin, "removed_admin", target.id, target.email, f"Revoked admin privileges from {target.email}")
        return target

    def set_disabled(self, db: Session, admin: User, user_id: str, is_disabled: bool) -> User:
        target = self.get_target(db, user_id)
        if is_disabled:
            self._not_self(admin, target, "disable")

        target.is_disabled = is_disabled
        db.commit()
        db.refresh(target)

        if is_disabled:
            self._log(db, admin, "disabled_account", target.id, target.email, f"Disabled account {target.email}")
        else:
            self._log(db, admin, "enabled_account", target.id, target.email, f"Enabled account {target.email}")
        return target

    def delete_user(self, db: Session, admin: User, user_id: str) -> None:
        target = self.get_target(db, user_id)
        self._not_self(admin, target, "delete")

        # Read before the row is gone
        target_id, target_email = target.id, target.email
        db.delete(target)
        db.commit()

        self._log(db, admin, "deleted_account", target_id, target_email,
                  f"Deleted account {target_email} and all of its data")

    def reset_password(self, db: Session, identity: IdentityProvider, admin: User, user_id: str) -> dict:
        target = self.get_target(db, user_id)
        try:
            link = identity.generate_password_reset_link(target.email)
        except IdentityError as e:
            logger.error("Password reset link failed for %s: %s", target.id, e)
            raise HTTPException(status_code=502, detail="Could not generate password reset link")

        self._log(db, admin, "reset_password", target.id, target.email,
                  f"Generated password reset link for {target.email}")
        return {"link": link, "email": target.email}

    def list_users(self, db: Session) -> list:
        return db.query(User).order_by(User.created_at.desc(), User.email).all()

    def list_logs(self, db: Session, limit: int = 50) -> list:
        return db.query(AdminLog).order_by(AdminLog.created_at.desc()).limit(limit).all()

    def stats(self, db: Session) -> dict:
        return {
            "total_users": db.query(User).count(),
            "active_users": db.query(User).filter(User.is_disabled.is_(False)).count(),
            "total_transactions": db.query(Transaction).count(),
            "total_budgets": db.query(Budget).count(),
        }


admin_service = AdminService()
