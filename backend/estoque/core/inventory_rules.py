"""
Inventory rules: how a stock movement changes a product balance.

Movements are either "entrada" (inbound, adds to the balance) or "saida"
(outbound, subtracts from it). A balance can never go below zero.
"""
from enum import Enum
from typing import Any, Union


class MovementType(str, Enum):
    entrada = "entrada"
    saida = "saida"


def parse_movement_type(value: Union[str, MovementType]) -> MovementType:
    """
    Normalize a movement direction.

    Args:
        value: "entrada", "saida" or a MovementType member

    Returns:
        The matching MovementType

    Raises:
        ValueError: if the value is not a known direction
    """
    if isinstance(value, MovementType):
        return value
    try:
        return MovementType(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Invalid movement type: {value!r}") from None


def validate_quantity(quantity: Any) -> int:
    """
    Check that a movement quantity is a positive integer.

    Integral floats (e.g. 5.0) and digit strings are accepted and converted;
    booleans, fractions, non-numeric text and values <= 0 are rejected.

    Raises:
        ValueError: if the quantity is not a positive integer
    """
    if isinstance(quantity, bool):
        raise ValueError("Quantity must be a number")
    if isinstance(quantity, str):
        quantity = quantity.strip()
        if not quantity.lstrip("-").isdigit():
            raise ValueError("Quantity must be a number")
        quantity = int(quantity)
    elif isinstance(quantity, float):
        if not quantity.is_integer():
            raise ValueError("Quantity must be a whole number")
        quantity = int(quantity)
    elif not isinstance(quantity, int):
        raise ValueError("Quantity must be a number")
    if quantity <= 0:
        raise ValueError("Quantity must be greater than zero")
    return quantity


def compute_balance_after(balance_before: int, movement_type: Union[str, MovementType], quantity: int) -> int:
    """
    Balance resulting from applying a movement. The result may be negative;
    callers decide whether to reject it.
    """
    if parse_movement_type(movement_type) is MovementType.entrada:
        return balance_before + quantity
    return balance_before - quantity


def is_low_stock(stock: int, min_stock: int) -> bool:
    """A product is low on stock when its balance is at or below its minimum."""
    return stock <= min_stock
