from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.auth_schemas import LoginSchema, RegisterSchema, TokenResponse
from app.schemas.user_schemas import UserResponse
from app.services.auth_service import authenticate_user, logout, register
from app.services.dependencies import create_user_token, get_current_user
from app.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterSchema, db: Session = Depends(get_db)):
    user = register(db=db, payload=payload)
    logger.info("Registered %s as %s", user.email, user.role.value)
    return {"access_token": create_user_token(user), "token_type": "bearer", "user": user}


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginSchema, db: Session = Depends(get_db)):
    user = authenticate_user(db=db, payload=payload)
    return {"access_token": create_user_token(user), "token_type": "bearer", "user": user}


@router.post("/logout")
def logout_user(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    logout(db=db, user=user)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user
