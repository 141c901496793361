import jwt
from datetime import datetime, timedelta, timezone
from jwt.exceptions import InvalidTokenError

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationFailed, ForbiddenRole
from app.db.database import get_db
from app.models.user_models import User, UserRole


# HTTPBearer for extracting Bearer token from Authorization header
http_bearer = HTTPBearer(auto_error=False)

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()

    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
        "type": "access",
    })

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({
        "sub": str(user.id),
        "role": user.role.value,
        "token_version": user.token_version,
    })


def verify_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except InvalidTokenError:
        raise AuthenticationFailed()


def _get_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise AuthenticationFailed()
    token = credentials.credentials
    if not token:
        raise AuthenticationFailed()
    return token


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db)
) -> User:
    token = _get_bearer_token(credentials)
    payload = verify_access_token(token)

    if payload.get("type") != "access":
        raise AuthenticationFailed("Access token required")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationFailed()

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthenticationFailed()

    token_ver = payload.get("token_version")
    if token_ver is None or token_ver != user.token_version:
        raise AuthenticationFailed("Token has been revoked")

    return user


def require_roles(*roles: UserRole):
    """Dependency factory: the current user must hold one of ``roles``."""

    def _checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise ForbiddenRole("Access denied. Insufficient permissions.")
        return user

    return _checker


get_current_admin = require_roles(UserRole.admin)
get_current_staff = require_roles(UserRole.faculty, UserRole.admin)
