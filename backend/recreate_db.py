"""
Drop and recreate every table, then load the demo data.
"""
import logging

from estoque.core.database import SessionLocal, engine
from estoque.core.logging import setup_logging
from estoque.models import Base
from estoque.services.seed import DEMO_EMAIL, DEMO_PASSWORD, seed_demo

logger = logging.getLogger("recreate_db")


def recreate_db():
    logger.info("Dropping existing tables...")
    Base.metadata.drop_all(bind=engine)

    logger.info("Creating tables...")
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        seed_demo(db)

    logger.info("Database recreated. Login: %s / %s", DEMO_EMAIL, DEMO_PASSWORD)


if __name__ == "__main__":
    setup_logging()
    recreate_db()
