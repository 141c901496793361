from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.class_schemas import ClassResponse, SectionResponse
from app.schemas.dashboard_schemas import FacultyDashboard
from app.schemas.user_schemas import UserResponse
from app.services.dashboard_service import faculty_dashboard
from app.services.dependencies import get_current_staff
from app.services.directory_service import (
    get_faculty_class_sections,
    get_faculty_classes,
    get_faculty_students,
)

router = APIRouter(prefix="/faculty", tags=["Faculty"])


@router.get("/dashboard", response_model=FacultyDashboard)
def get_dashboard(faculty: User = Depends(get_current_staff), db: Session = Depends(get_db)):
    return faculty_dashboard(db=db, faculty=faculty)


@router.get("/students", response_model=list[UserResponse])
def get_my_students(faculty: User = Depends(get_current_staff), db: Session = Depends(get_db)):
    return get_faculty_students(db=db, faculty=faculty)


@router.get("/classes", response_model=list[ClassResponse])
def get_my_classes(faculty: User = Depends(get_current_staff), db: Session = Depends(get_db)):
    return get_faculty_classes(db=db, faculty=faculty)


@router.get("/sections", response_model=list[SectionResponse])
def get_my_sections(faculty: User = Depends(get_current_staff), db: Session = Depends(get_db)):
    return get_faculty_class_sections(db=db, faculty=faculty)
