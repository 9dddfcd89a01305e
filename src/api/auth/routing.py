import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from api.db.session import get_session
from api.db.models import User
from api.errors import Conflict, Unauthorized, api_response
from .models import UserCreate, UserLogin, UserRead
from .utils import (
    hash_password,
    verify_password,
    create_access_token,
    get_current_user,
)

logger = logging.getLogger("auth")

router = APIRouter(tags=["auth"])


def _token_payload(user: User) -> dict:
    token = create_access_token({"sub": user.id})
    return {
        "access_token": token,
        "token_type": "bearer",
        "user": UserRead.model_validate(user),
    }


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, db: Session = Depends(get_session)):
    existing = db.exec(
        select(User).where((User.username == user.username) | (User.email == user.email))
    ).first()
    if existing:
        raise Conflict("Username or email already registered")

    db_user = User(
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        hashed_password=hash_password(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same username/email.
        db.rollback()
        raise Conflict("Username or email already registered")
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id} ({db_user.username})")
    return api_response(_token_payload(db_user), "User registered successfully")


@router.post("/login")
def login(user: UserLogin, db: Session = Depends(get_session)):
    db_user = db.exec(select(User).where(User.username == user.username)).first()
    if not db_user or not verify_password(user.password, db_user.hashed_password):
        logger.warning(f"Failed login for username {user.username}")
        raise Unauthorized("Invalid credentials")
    return api_response(_token_payload(db_user), "Logged in successfully")


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return api_response(UserRead.model_validate(current_user), "Current user fetched successfully")
