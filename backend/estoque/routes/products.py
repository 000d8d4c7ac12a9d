from decimal import Decimal
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, condecimal, field_validator
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from estoque.core.database import get_db
from estoque.core.deps import get_current_user
from estoque.core.exceptions import (
    AppException,
    CategoryNotFound,
    DuplicateProductCode,
    ProductInUse,
    ProductNotFound,
)
from estoque.models.category import Category
from estoque.models.product import Product
from estoque.models.user import User


router = APIRouter()
logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ProductBase(BaseModel):
    name: str
    code: str
    category_id: Optional[int] = None
    description: Optional[str] = None
    product_type: Optional[str] = None
    material: Optional[str] = None
    size: Optional[str] = None
    weight: Optional[condecimal(max_digits=10, decimal_places=3)] = None
    unit: str = "unidade"
    stock: int = Field(0, ge=0)
    min_stock: int = Field(10, ge=0)
    unit_price: Optional[condecimal(max_digits=10, decimal_places=2)] = None
    location: Optional[str] = None
    active: bool = True

    @field_validator("name", "code")
    @classmethod
    def required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value

    @field_validator("description", "product_type", "material", "size", "location")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class ProductOut(ProductBase):
    id: int
    category_name: Optional[str] = None
    weight: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None

    class Config:
        from_attributes = True


def _get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise ProductNotFound()
    return product


def _check_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and not db.query(Category.id).filter(Category.id == category_id).first():
        raise CategoryNotFound()


def is_duplicate_code(exc: IntegrityError) -> bool:
    """Recognise a unique violation on the product code (PostgreSQL or SQLite)."""
    msg = str(exc.orig)
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION or "UNIQUE constraint failed" in msg:
        return "uq_products_code" in msg or "products.code" in msg
    return False


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    msg = str(exc.orig)
    return getattr(exc.orig, "pgcode", None) == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in msg


def _apply(product: Product, data: ProductBase) -> None:
    # Full replacement: optional fields missing from the payload become null
    for field, value in data.model_dump().items():
        setattr(product, field, value)


def _save(db: Session, product: Product) -> Product:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_duplicate_code(e):
            raise DuplicateProductCode() from None
        logger.warning("Product rejected by store: %s", e.orig)
        raise AppException("Erro ao salvar produto") from None
    db.refresh(product)
    return product


@router.get("/", response_model=List[ProductOut])
def list_products(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    q: Optional[str] = Query(None, description="Search by name, code or type"),
    active: Optional[bool] = Query(None, description="Filter by active status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(500, ge=1, le=2000),
):
    logger.debug("list_products q=%s active=%s skip=%s limit=%s", q, active, skip, limit)
    query = db.query(Product)
    if q:
        qn = q.strip().lower()
        if qn:
            query = query.filter(
                or_(
                    func.lower(Product.name).contains(qn, autoescape=True),
                    func.lower(Product.code).contains(qn, autoescape=True),
                    func.lower(Product.product_type).contains(qn, autoescape=True),
                )
            )
    if active is not None:
        query = query.filter(Product.active == active)
    return query.order_by(Product.name.asc()).offset(skip).limit(limit).all()


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(
    data: ProductBase,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _check_category(db, data.category_id)
    product = Product()
    _apply(product, data)
    db.add(product)
    product = _save(db, product)
    logger.info("Product %s (%s) created by user %s", product.id, product.code, user.id)
    return product


@router.get("/lookup", response_model=ProductOut)
def lookup_product(
    code: str = Query(..., description="Product code"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.code == code.strip()).first()
    if not product:
        raise ProductNotFound()
    return product


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    data: ProductBase,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = _get_product(db, product_id)
    _check_category(db, data.category_id)
    _apply(product, data)
    product = _save(db, product)
    logger.info("Product %s updated by user %s", product.id, user.id)
    return product


@router.post("/{product_id}/archive", response_model=ProductOut)
def archive_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = _get_product(db, product_id)
    product.active = False
    db.commit()
    db.refresh(product)
    return product


@router.post("/{product_id}/unarchive", response_model=ProductOut)
def unarchive_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = _get_product(db, product_id)
    product.active = True
    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    product = _get_product(db, product_id)
    db.delete(product)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_foreign_key_violation(e):
            raise ProductInUse() from None
        raise
    logger.info("Product %s deleted by user %s", product_id, user.id)
    return {"ok": True}
