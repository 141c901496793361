from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.dashboard_schemas import AdminDashboard
from app.schemas.user_schemas import UserCreate, UserResponse, UserUpdate
from app.services.dashboard_service import admin_dashboard
from app.services.dependencies import get_current_admin
from app.services.directory_service import create_user, delete_user, list_users, update_user

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/dashboard", response_model=AdminDashboard)
def get_dashboard(admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    return admin_dashboard(db=db, actor=admin)


@router.get("/users", response_model=list[UserResponse])
def get_users(admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    return list_users(db=db, actor=admin)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def add_user(
    payload: UserCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return create_user(db=db, actor=admin, payload=payload)


@router.put("/users/{user_id}", response_model=UserResponse)
def edit_user(
    user_id: str,
    payload: UserUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return update_user(db=db, actor=admin, user_id=user_id, payload=payload)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    delete_user(db=db, actor=admin, user_id=user_id)
    return None
