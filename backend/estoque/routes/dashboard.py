from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from estoque.core.database import get_db
from estoque.core.deps import get_current_user
from estoque.models.user import User
from estoque.routes.auth import UserOut
from estoque.services.dashboard_service import get_dashboard


router = APIRouter()


class LowStockProduct(BaseModel):
    id: int
    name: str
    code: str
    stock: int
    min_stock: int

    class Config:
        from_attributes = True


class DashboardOut(BaseModel):
    user: UserOut
    total_products: int
    low_stock_count: int
    movements_today: int
    categories: int
    low_stock_products: List[LowStockProduct]


@router.get("", response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Stock summary for the home screen: active products, low-stock items and today's activity."""
    return {"user": user, **get_dashboard(db)}
