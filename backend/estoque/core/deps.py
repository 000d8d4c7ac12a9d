from typing import Any, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from estoque.core.database import get_db
from estoque.core.security import decode_token
from estoque.models.user import User


def resolve_token_user(db: Session, payload: Optional[dict[str, Any]], token_type: str) -> Optional[User]:
    """Return the user a decoded token belongs to, or None when the token is
    of the wrong type, malformed, or was issued before the last sign-out."""
    if not payload or payload.get("type") != token_type:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if not user or payload.get("ver") != user.token_version:
        return None
    return user


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
) -> User:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    user = resolve_token_user(db, decode_token(token), "access")
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user
