import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from budget_api.models.category import Category

logger = logging.getLogger(__name__)


def get_owned_or_404(db: Session, model, record_id: str, user_id: str):
    """Load a record by id and make sure the caller owns it.

    Missing records are a 404; records owned by someone else are a 403.
    """
    record = db.get(model, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
    if record.user_id != user_id:
        logger.warning("User %s tried to access %s %s owned by %s", user_id, model.__name__, record_id, record.user_id)
        raise HTTPException(status_code=403, detail="You do not have access to this resource")
    return record


def check_category(db: Session, category_id: Optional[str], user_id: str, kind: Optional[str]) -> None:
    """A referenced category must belong to the caller and match the record's kind."""
    if category_id is None:
        return
    category = db.get(Category, category_id)
    if category is None or category.user_id != user_id:
        raise HTTPException(status_code=400, detail="Unknown category")
    if kind is not None and category.type != kind:
        raise HTTPException(status_code=400, detail=f"Category must be of type '{kind}'")
