from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from budget_api.core.security import get_current_user_id
from budget_api.db.session import get_db
from budget_api.models.category import Category
from budget_api.schemas.category import CategoryCreate, CategoryOut
from budget_api.schemas.common import Message
from budget_api.services.ownership import get_owned_or_404

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=List[CategoryOut])
def list_categories(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return (
        db.query(Category)
        .filter(Category.user_id == user_id)
        .order_by(Category.type, Category.name)
        .all()
    )


@router.post("", response_model=CategoryOut)
def create_category(payload: CategoryCreate, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    # Owner always comes from the token, whatever the body claims
    category = Category(user_id=user_id, **payload.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return get_owned_or_404(db, Category, category_id, user_id)


@router.delete("/{category_id}", response_model=Message)
def delete_category(category_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    category = get_owned_or_404(db, Category, category_id, user_id)
    db.delete(category)
    db.commit()
    return {"success": True}
