import logging

from sqlalchemy.orm import Session

from app.core.exceptions import AuthenticationFailed, ForbiddenRole
from app.models.user_models import User, UserRole
from app.schemas.auth_schemas import LoginSchema, RegisterSchema
from app.services.directory_service import register_user
from app.utils.hashing import verify_password

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = {UserRole.student, UserRole.faculty}


def register(db: Session, payload: RegisterSchema) -> User:
    if payload.role not in SELF_REGISTER_ROLES:
        raise ForbiddenRole("Admin accounts cannot be self-registered")

    return register_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        class_id=payload.class_id,
        section_id=payload.section_id,
    )


def authenticate_user(db: Session, payload: LoginSchema) -> User:
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password):
        logger.info("failed login for %s", payload.email)
        raise AuthenticationFailed("Invalid email or password")
    return user


def logout(db: Session, user: User) -> None:
    # bumping the version invalidates every token issued so far
    user.token_version = (user.token_version or 1) + 1
    db.commit()
