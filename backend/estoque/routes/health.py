from fastapi import APIRouter
from sqlalchemy import text

from estoque.core.config import settings
from estoque.core.database import engine


router = APIRouter()


@router.get("/health")
def health():
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.env}
