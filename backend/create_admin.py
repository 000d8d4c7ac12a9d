#!/usr/bin/env python3
"""
Create (or reset the password of) a user.
Run inside the container: docker-compose exec backend python create_admin.py
Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME.
"""
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from estoque.core.database import SessionLocal
from estoque.core.logging import setup_logging
from estoque.core.security import hash_password
from estoque.models.user import User

logger = logging.getLogger("create_admin")


def create_admin(email: str, password: str, name: str) -> User:
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.hashed_password = hash_password(password)
            # Existing sessions must log in again with the new password
            user.token_version += 1
            logger.info("User %s exists, password reset", email)
        else:
            user = User(email=email, hashed_password=hash_password(password), name=name, job_title="Gerente")
            db.add(user)
            logger.info("User %s created", email)
        db.commit()
        db.refresh(user)
        return user
    except Exception:
        db.rollback()
        logger.exception("Error creating user %s", email)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging()
    create_admin(
        email=os.getenv("ADMIN_EMAIL", "admin@estoque.com.br").lower(),
        password=os.getenv("ADMIN_PASSWORD", "admin123"),
        name=os.getenv("ADMIN_NAME", "Administrador"),
    )
