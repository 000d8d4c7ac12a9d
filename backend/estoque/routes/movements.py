from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session, joinedload

from estoque.core.config import settings
from estoque.core.database import get_db
from estoque.core.deps import get_current_user
from estoque.core.inventory_rules import MovementType
from estoque.models.movement import Movement
from estoque.models.user import User
from estoque.services.ledger_service import record_movement


router = APIRouter()


def as_utc(value: datetime) -> datetime:
    """Timestamps are stored in UTC; naive input is taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MovementCreate(BaseModel):
    product_id: int
    movement_type: MovementType
    quantity: int
    reason: str
    notes: Optional[str] = None


class MovementProduct(BaseModel):
    name: str
    code: str

    class Config:
        from_attributes = True


class MovementUser(BaseModel):
    name: str

    class Config:
        from_attributes = True


class MovementOut(BaseModel):
    id: int
    product_id: int
    user_id: int
    movement_type: MovementType
    quantity: int
    balance_before: int
    balance_after: int
    reason: str
    notes: Optional[str]
    created_at: datetime
    product: Optional[MovementProduct] = None
    user: Optional[MovementUser] = None

    class Config:
        from_attributes = True


def _movement_query(db: Session):
    return db.query(Movement).options(joinedload(Movement.product), joinedload(Movement.user))


@router.post("", response_model=MovementOut, status_code=201)
def create_movement(
    data: MovementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record an entrada or saida and update the product balance"""
    movement = record_movement(
        db,
        product_id=data.product_id,
        movement_type=data.movement_type,
        quantity=data.quantity,
        reason=data.reason,
        notes=data.notes,
        user_id=current_user.id,
    )
    return _movement_query(db).filter(Movement.id == movement.id).one()


@router.get("", response_model=List[MovementOut])
def list_movements(
    product_id: Optional[int] = None,
    movement_type: Optional[MovementType] = None,
    since: Optional[datetime] = Query(None, description="Only movements at or after this timestamp"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Most recent movements, newest first"""
    query = _movement_query(db)
    if product_id is not None:
        query = query.filter(Movement.product_id == product_id)
    if movement_type is not None:
        query = query.filter(Movement.movement_type == movement_type.value)
    if since is not None:
        query = query.filter(Movement.created_at >= as_utc(since))
    return (
        query.order_by(Movement.created_at.desc(), Movement.id.desc())
        .limit(limit or settings.recent_movements_limit)
        .all()
    )


@router.get("/product/{product_id}", response_model=List[MovementOut])
def get_product_movements(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Full movement history of one product"""
    return (
        _movement_query(db)
        .filter(Movement.product_id == product_id)
        .order_by(Movement.created_at.desc(), Movement.id.desc())
        .all()
    )
