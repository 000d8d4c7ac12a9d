import os
import tempfile

# Must be set before estoque.core.config is imported
_DB_PATH = os.path.join(tempfile.gettempdir(), f"estoque_test_{os.getpid()}.db")
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LEDGER_ATOMIC_WRITES"] = "false"

import pytest
from fastapi.testclient import TestClient

from estoque.core.database import SessionLocal, engine
from estoque.core.security import hash_password
from estoque.main import app
from estoque.models import Base, Category, Product, User


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def user(db):
    u = User(email="operador@estoque.com.br", hashed_password=hash_password("secret123"), name="Ana", job_title="Operador")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def auth_headers(client):
    r = client.post("/auth/signup", json={
        "email": "gerente@estoque.com.br",
        "password": "secret123",
        "name": "Bruno",
        "job_title": "Gerente",
    })
    assert r.status_code == 201
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def category(db):
    c = Category(name="Ferramentas")
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture
def make_product(db):
    counter = {"n": 0}

    def _make(stock=10, min_stock=5, active=True, **fields):
        counter["n"] += 1
        product = Product(
            name=fields.pop("name", f"Produto {counter['n']}"),
            code=fields.pop("code", f"P-{counter['n']:03d}"),
            stock=stock,
            min_stock=min_stock,
            active=active,
            **fields,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make
