"""
Stock movement ledger.

``record_movement`` reads the product balance, computes the balance after the
movement, and persists both the movement row and the new product balance.

By default the two writes are separate commits against an unlocked read, so
concurrent movements on the same product can overwrite each other's balance,
and a failed balance update leaves the movement recorded with the product
unchanged. Setting ``LEDGER_ATOMIC_WRITES=true`` locks the product row and
commits both writes together instead.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from estoque.core.config import settings
from estoque.core.exceptions import (
    InsufficientStock,
    InvalidMovement,
    InvalidQuantity,
    PersistenceFailure,
    ProductNotFound,
)
from estoque.core.inventory_rules import (
    MovementType,
    compute_balance_after,
    parse_movement_type,
    validate_quantity,
)
from estoque.models.movement import Movement
from estoque.models.product import Product

logger = logging.getLogger(__name__)


def _normalize_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def _write_balance(db: Session, product_id: int, balance_after: int) -> None:
    db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock=balance_after)
        .execution_options(synchronize_session=False)
    )


def _load_product(db: Session, product_id: int, lock: bool = False) -> Product:
    query = db.query(Product).filter(Product.id == product_id)
    if lock:
        query = query.with_for_update().populate_existing()
    product = query.first()
    if not product or not product.active:
        raise ProductNotFound()
    return product


def record_movement(
    db: Session,
    *,
    product_id: int,
    movement_type: Any,
    quantity: Any,
    reason: Optional[str],
    user_id: int,
    notes: Optional[str] = None,
    atomic: Optional[bool] = None,
) -> Movement:
    """
    Record a stock entry or exit and apply it to the product balance.

    Validation happens before any query is issued: quantity must be a positive
    integer, the direction "entrada" or "saida", and the reason non-empty.

    Raises:
        InvalidQuantity, InvalidMovement: bad input, nothing read or written
        ProductNotFound: unknown or archived product
        InsufficientStock: the movement would make the balance negative
        PersistenceFailure: the store rejected one of the writes
    """
    try:
        quantity = validate_quantity(quantity)
    except ValueError:
        raise InvalidQuantity() from None
    try:
        movement_type = parse_movement_type(movement_type)
    except ValueError:
        raise InvalidMovement("Tipo de movimentação inválido. Use 'entrada' ou 'saida'") from None
    reason = _normalize_text(reason)
    if not reason:
        raise InvalidMovement("O motivo da movimentação é obrigatório")
    notes = _normalize_text(notes)

    if atomic is None:
        atomic = settings.ledger_atomic_writes

    if atomic:
        return _record_atomic(db, product_id, movement_type, quantity, reason, notes, user_id)
    return _record_two_step(db, product_id, movement_type, quantity, reason, notes, user_id)


def _prepare(
    product: Product,
    movement_type: MovementType,
    quantity: int,
    reason: str,
    notes: Optional[str],
    user_id: int,
) -> Movement:
    balance_before = product.stock
    balance_after = compute_balance_after(balance_before, movement_type, quantity)
    if balance_after < 0:
        logger.info(
            "Rejected %s of %s for product %s: balance is %s",
            movement_type.value, quantity, product.id, balance_before,
        )
        raise InsufficientStock(details={"balance": balance_before, "requested": quantity})
    return Movement(
        product_id=product.id,
        user_id=user_id,
        movement_type=movement_type.value,
        quantity=quantity,
        balance_before=balance_before,
        balance_after=balance_after,
        reason=reason,
        notes=notes,
    )


def _record_two_step(db, product_id, movement_type, quantity, reason, notes, user_id) -> Movement:
    product = _load_product(db, product_id)
    movement = _prepare(product, movement_type, quantity, reason, notes, user_id)

    db.add(movement)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Movement insert failed for product %s", product_id)
        raise PersistenceFailure() from None

    try:
        _write_balance(db, product_id, movement.balance_after)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            "Movement %s recorded but product %s balance was not updated to %s; "
            "ledger and product balance are out of sync",
            movement.id, product_id, movement.balance_after,
            exc_info=True,
        )
        raise PersistenceFailure(details={"movement_id": movement.id}) from None

    db.refresh(movement)
    logger.info(
        "Movement %s: %s %s on product %s (%s -> %s)",
        movement.id, movement.movement_type, quantity, product_id,
        movement.balance_before, movement.balance_after,
    )
    return movement


def _record_atomic(db, product_id, movement_type, quantity, reason, notes, user_id) -> Movement:
    try:
        product = _load_product(db, product_id, lock=True)
        movement = _prepare(product, movement_type, quantity, reason, notes, user_id)
    except (ProductNotFound, InsufficientStock):
        # Release the row lock
        db.rollback()
        raise

    try:
        db.add(movement)
        _write_balance(db, product_id, movement.balance_after)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Atomic movement failed for product %s", product_id)
        raise PersistenceFailure() from None

    db.refresh(movement)
    logger.info(
        "Movement %s (atomic): %s %s on product %s (%s -> %s)",
        movement.id, movement.movement_type, quantity, product_id,
        movement.balance_before, movement.balance_after,
    )
    return movement
