import logging

from sqlalchemy.orm import Session

from estoque.core.security import hash_password
from estoque.models.category import Category
from estoque.models.product import Product
from estoque.models.user import User

logger = logging.getLogger(__name__)

DEMO_EMAIL = "admin@estoque.com.br"
DEMO_PASSWORD = "secret123"

DEMO_CATEGORIES = ["Ferramentas", "Parafusos", "Embalagens"]

DEMO_PRODUCTS = [
    {"name": "Chave de fenda", "code": "FER-001", "category": "Ferramentas", "stock": 25, "min_stock": 10, "unit_price": "18.90"},
    {"name": "Martelo", "code": "FER-002", "category": "Ferramentas", "stock": 4, "min_stock": 5, "unit_price": "42.50"},
    {"name": "Parafuso 6mm", "code": "PAR-006", "category": "Parafusos", "stock": 500, "min_stock": 200, "unit_price": "0.15"},
    {"name": "Caixa de papelão", "code": "EMB-010", "category": "Embalagens", "stock": 8, "min_stock": 20, "unit_price": "3.20"},
]


def seed_demo(db: Session) -> None:
    if db.query(User).filter(User.email == DEMO_EMAIL).first():
        return

    db.add(User(email=DEMO_EMAIL, hashed_password=hash_password(DEMO_PASSWORD), name="Administrador", job_title="Gerente"))

    categories = {}
    for name in DEMO_CATEGORIES:
        category = db.query(Category).filter(Category.name == name).first()
        if not category:
            category = Category(name=name)
            db.add(category)
        categories[name] = category
    db.flush()

    for data in DEMO_PRODUCTS:
        if db.query(Product).filter(Product.code == data["code"]).first():
            continue
        db.add(
            Product(
                name=data["name"],
                code=data["code"],
                category_id=categories[data["category"]].id,
                stock=data["stock"],
                min_stock=data["min_stock"],
                unit_price=data["unit_price"],
            )
        )
    db.commit()
    logger.info("Demo data seeded (login %s)", DEMO_EMAIL)
