from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Type, TypeVar

from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session, SQLModel

from api.db.session import get_session
from api.db.models import User
from api.config import settings
from api.errors import Forbidden, InvalidArgument, NotFound, Unauthorized
from api.utils import parse_id

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")

OwnedModel = TypeVar("OwnedModel", bound=SQLModel)


def _require_secret_key() -> str:
    if not settings.SECRET_KEY:
        raise RuntimeError(
            "SECRET_KEY must be set via environment variable for JWT operations"
        )
    return settings.SECRET_KEY


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_session)
) -> User:
    try:
        payload = decode_access_token(token)
        user_id = parse_id(payload.get("sub"))
    except (JWTError, InvalidArgument):
        raise Unauthorized()
    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized()
    return user


def require_owner(
    db: Session,
    model: Type[OwnedModel],
    resource_id: str,
    current_user: User,
    label: str,
    action: str = "modify",
) -> OwnedModel:
    """Load ``model`` by id and check the caller owns it.

    Raises NotFound when the row is missing and Forbidden when its
    ``owner_id`` is not the caller's id.
    """
    resource = db.get(model, resource_id)
    if resource is None:
        raise NotFound(f"{label} not found")
    if resource.owner_id != current_user.id:
        raise Forbidden(f"You are not authorized to {action} this {label.lower()}")
    return resource


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "iat": now})
    if settings.JWT_ISSUER:
        to_encode["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    secret = _require_secret_key()
    encoded_jwt = jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict:
    secret = _require_secret_key()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE if settings.JWT_AUDIENCE else None,
        issuer=settings.JWT_ISSUER if settings.JWT_ISSUER else None,
        options={"verify_aud": bool(settings.JWT_AUDIENCE)},
    )
