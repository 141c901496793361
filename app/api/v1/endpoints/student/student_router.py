from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.class_schemas import ClassResponse
from app.schemas.dashboard_schemas import StudentDashboard
from app.schemas.user_schemas import ProfileUpdate, UserResponse
from app.services.dashboard_service import student_dashboard
from app.services.dependencies import get_current_user
from app.services.directory_service import list_classes, update_profile

router = APIRouter(prefix="/student", tags=["Student"])


@router.get("/dashboard", response_model=StudentDashboard)
def get_dashboard(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return student_dashboard(db=db, student=user)


@router.get("/profile", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)):
    return user


@router.put("/profile", response_model=UserResponse)
def edit_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return update_profile(db=db, user=user, payload=payload)


@router.get("/classes", response_model=list[ClassResponse])
def get_classes(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_classes(db=db)
