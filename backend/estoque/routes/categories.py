from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from estoque.core.database import get_db
from estoque.core.deps import get_current_user
from estoque.core.exceptions import DuplicateCategory
from estoque.models.category import Category
from estoque.models.user import User


router = APIRouter()


class CategoryIn(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CategoryOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


@router.get("/", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Category).order_by(Category.name.asc()).all()


@router.post("/", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if db.query(Category).filter(Category.name == data.name).first():
        raise DuplicateCategory()
    category = Category(name=data.name)
    db.add(category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateCategory() from None
    db.refresh(category)
    return category
