from .base import Base
from .category import Category
from .user import User
from .product import Product
from .movement import Movement

__all__ = ["Base", "Category", "User", "Product", "Movement"]
