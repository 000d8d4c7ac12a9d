import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from estoque.core.config import settings
from estoque.core.database import get_db
from estoque.core.deps import get_current_user, resolve_token_user
from estoque.core.exceptions import EmailAlreadyRegistered, InvalidCredentials
from estoque.core.security import create_token_pair, decode_token, hash_password, verify_password
from estoque.models.user import User


router = APIRouter()
logger = logging.getLogger(__name__)


class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    job_title: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < settings.min_password_length:
            raise ValueError(f"Password must have at least {settings.min_password_length} characters")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    id: int
    email: EmailStr
    name: str
    job_title: str

    class Config:
        from_attributes = True


def _issue_tokens(user: User) -> TokenResponse:
    access, refresh = create_token_pair(str(user.id), user.token_version)
    return TokenResponse(access_token=access, refresh_token=refresh)


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise EmailAlreadyRegistered()

    user = User(
        email=email,
        hashed_password=hash_password(data.password),
        name=data.name,
        job_title=(data.job_title or "").strip() or "Operador",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyRegistered() from None
    db.refresh(user)
    logger.info("User %s signed up", user.id)
    return _issue_tokens(user)


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email.lower()).first()
    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning("Invalid credentials for %s", data.email)
        raise InvalidCredentials()
    return _issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token_endpoint(data: RefreshRequest, db: Session = Depends(get_db)):
    user = resolve_token_user(db, decode_token(data.refresh_token), "refresh")
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    return _issue_tokens(user)


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    user.token_version += 1
    db.commit()
    logger.info("User %s signed out", user.id)
