import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from budget_api.models.category import Category
from budget_api.models.user import User
from budget_api.schemas.user import UserSync

logger = logging.getLogger(__name__)

# Seeded for every new account
DEFAULT_CATEGORIES = [
    {"name": "Groceries", "type": "expense", "icon": "ShoppingCart", "color": "#ef4444"},
    {"name": "Rent", "type": "expense", "icon": "Home", "color": "#f59e0b"},
    {"name": "Transportation", "type": "expense", "icon": "Car", "color": "#3b82f6"},
    {"name": "Dining Out", "type": "expense", "icon": "Utensils", "color": "#ec4899"},
    {"name": "Entertainment", "type": "expense", "icon": "Smartphone", "color": "#8b5cf6"},
    {"name": "Salary", "type": "income", "icon": "DollarSign", "color": "#10b981"},
    {"name": "Freelance", "type": "income", "icon": "Briefcase", "color": "#059669"},
]


def _create_user(db: Session, data: UserSync) -> User:
    clash = db.query(User).filter(func.lower(User.email) == data.email.lower()).first()
    if clash is not None:
        raise HTTPException(status_code=409, detail="Email is already registered to another account")

    user = User(id=data.id, email=data.email, display_name=data.display_name, photo_url=data.photo_url)
    for fields in DEFAULT_CATEGORIES:
        user.categories.append(Category(is_default=True, **fields))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent sync created the same account first
        db.rollback()
        existing = db.get(User, data.id)
        if existing is None:
            raise HTTPException(status_code=409, detail="Email is already registered to another account")
        return existing

    logger.info("Created user %s with %d default categories", user.id, len(DEFAULT_CATEGORIES))
    return user


def _verified_email(data: UserSync, claims: Optional[dict]) -> Optional[str]:
    # Only a token issued for this very account vouches for its email
    if not claims or claims.get("uid") != data.id or not claims.get("email_verified"):
        return None
    email = claims.get("email")
    return email.lower() if email else None


def sync_user(db: Session, data: UserSync, admin_emails, claims: Optional[dict] = None) -> User:
    """Create-or-load the account for an identity-provider user.

    Promotion to admin looks at the email already stored for the account,
    never at the email in the request body, and only happens when the
    caller also presents a token for the account whose verified email is
    that same address.
    """
    user = db.get(User, data.id)
    if user is None:
        user = _create_user(db, data)

    stored = user.email.lower()
    if not user.is_admin and stored in admin_emails:
        if _verified_email(data, claims) == stored:
            user.is_admin = True
            db.commit()
            logger.warning("Promoted %s (%s) to admin from the bootstrap allowlist", user.id, user.email)
        else:
            logger.info("Skipped admin promotion for %s: no verified token for %s", user.id, user.email)

    db.refresh(user)
    return user
