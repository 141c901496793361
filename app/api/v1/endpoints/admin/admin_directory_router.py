from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.class_schemas import (
    AssignmentResponse,
    ClassCreate,
    ClassResponse,
    FacultyClassAssignment,
    FacultySectionAssignment,
    SectionCreate,
    SectionResponse,
    SectionUpdate,
)
from app.services.dependencies import get_current_admin
from app.services.directory_service import (
    assign_faculty_class,
    assign_faculty_section,
    create_class,
    create_section,
    delete_class,
    delete_section,
    list_classes,
    list_sections,
    remove_faculty_class,
    remove_faculty_section,
    update_section,
)

router = APIRouter(prefix="/admin", tags=["Admin (Directory)"])


# -------------------------
# CLASSES
# -------------------------
@router.get("/classes", response_model=list[ClassResponse])
def get_classes(admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    return list_classes(db=db)


@router.post("/classes", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
def add_class(
    payload: ClassCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return create_class(db=db, actor=admin, payload=payload)


@router.delete("/classes/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_class(
    class_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    delete_class(db=db, actor=admin, class_id=class_id)
    return None


# -------------------------
# SECTIONS
# -------------------------
@router.get("/sections", response_model=list[SectionResponse])
def get_sections(
    class_id: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return list_sections(db=db, class_id=class_id)


@router.get("/classes/{class_id}/sections", response_model=list[SectionResponse])
def get_class_sections(
    class_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return list_sections(db=db, class_id=class_id)


@router.post("/sections", response_model=SectionResponse, status_code=status.HTTP_201_CREATED)
def add_section(
    payload: SectionCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return create_section(db=db, actor=admin, payload=payload)


@router.put("/sections/{section_id}", response_model=SectionResponse)
def edit_section(
    section_id: str,
    payload: SectionUpdate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return update_section(db=db, actor=admin, section_id=section_id, payload=payload)


@router.delete("/sections/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_section(
    section_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    delete_section(db=db, actor=admin, section_id=section_id)
    return None


# -------------------------
# FACULTY ASSIGNMENTS
# -------------------------
@router.post("/faculty-classes", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def add_faculty_class(
    payload: FacultyClassAssignment,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return assign_faculty_class(db=db, actor=admin, payload=payload)


@router.delete("/faculty-classes/{faculty_id}/{class_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_faculty_class(
    faculty_id: str,
    class_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    remove_faculty_class(db=db, actor=admin, faculty_id=faculty_id, class_id=class_id)
    return None


@router.post("/faculty-sections", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def add_faculty_section(
    payload: FacultySectionAssignment,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return assign_faculty_section(db=db, actor=admin, payload=payload)


@router.delete("/faculty-sections/{faculty_id}/{section_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_faculty_section(
    faculty_id: str,
    section_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    remove_faculty_section(db=db, actor=admin, faculty_id=faculty_id, section_id=section_id)
    return None
