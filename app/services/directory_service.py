# app/services/directory_service.py
"""
Users, classes, sections and faculty assignments.

Mutations are admin-only (``authorize_manage_directory``); the read helpers at
the bottom back the faculty and student surfaces.
"""

import logging

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequest, Conflict, NotFound
from app.models.class_models import FacultyClass, FacultySection, SchoolClass, Section
from app.models.user_models import User, UserRole
from app.schemas.class_schemas import (
    ClassCreate,
    FacultyClassAssignment,
    FacultySectionAssignment,
    SectionCreate,
    SectionUpdate,
)
from app.schemas.user_schemas import ProfileUpdate, UserCreate, UserUpdate
from app.services.authorization_policy import authorize_manage_directory
from app.services.recipient_resolver import get_faculty_class_ids
from app.utils.hashing import get_password_hash

logger = logging.getLogger(__name__)


def _commit_or_conflict(db: Session, detail: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(detail)


# -------------------------
# MEMBERSHIP
# -------------------------
def normalize_membership(
    db: Session,
    role: UserRole,
    class_id: str | None,
    section_id: str | None,
) -> tuple[str | None, str | None]:
    """Only students belong to a class/section; a section implies its class."""
    if role != UserRole.student:
        return None, None

    if class_id and not db.query(SchoolClass.id).filter(SchoolClass.id == class_id).first():
        raise BadRequest("Class not found")

    if section_id:
        section = db.query(Section).filter(Section.id == section_id).first()
        if not section:
            raise BadRequest("Section not found")
        if class_id and section.class_id != class_id:
            raise BadRequest("Section does not belong to the selected class")
        class_id = section.class_id

    return class_id or None, section_id or None


def _email_taken(db: Session, email: str, exclude_user_id: str | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


# -------------------------
# USERS
# -------------------------
def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def register_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: UserRole,
    class_id: str | None = None,
    section_id: str | None = None,
) -> User:
    if _email_taken(db, email):
        raise Conflict("Email already exists")

    class_id, section_id = normalize_membership(db, role, class_id, section_id)
    user = User(
        name=name,
        email=email,
        password=get_password_hash(password),
        role=role,
        class_id=class_id,
        section_id=section_id,
    )
    db.add(user)
    _commit_or_conflict(db, "Email already exists")
    db.refresh(user)

    logger.info("user created id=%s role=%s", user.id, role.value)
    return user


def list_users(db: Session, actor: User) -> list[User]:
    authorize_manage_directory(actor)
    return db.query(User).order_by(desc(User.created_at)).all()


def create_user(db: Session, actor: User, payload: UserCreate) -> User:
    authorize_manage_directory(actor)
    return register_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        class_id=payload.class_id,
        section_id=payload.section_id,
    )


def _clear_faculty_assignments(db: Session, user_id: str) -> int:
    cleared = db.query(FacultyClass).filter(FacultyClass.faculty_id == user_id).delete(synchronize_session=False)
    cleared += db.query(FacultySection).filter(FacultySection.faculty_id == user_id).delete(
        synchronize_session=False
    )
    return cleared


def update_user(db: Session, actor: User, user_id: str, payload: UserUpdate) -> User:
    authorize_manage_directory(actor)
    user = get_user_or_404(db, user_id)

    if payload.email and payload.email != user.email:
        if _email_taken(db, payload.email, exclude_user_id=user.id):
            raise Conflict("Email already exists")
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name.strip()

    role = payload.role or UserRole(user.role)
    fields = payload.model_fields_set
    class_id = payload.class_id if "class_id" in fields else user.class_id
    section_id = payload.section_id if "section_id" in fields else user.section_id
    if "class_id" in fields and "section_id" not in fields and class_id != user.class_id:
        # moving to another class drops the old section
        section_id = None

    if UserRole(user.role) == UserRole.faculty and role != UserRole.faculty:
        # only faculty hold assignments
        cleared = _clear_faculty_assignments(db, user.id)
        logger.info("user %s left faculty role, %d assignments removed", user.id, cleared)

    user.role = role
    user.class_id, user.section_id = normalize_membership(db, role, class_id, section_id)

    _commit_or_conflict(db, "Email already exists")
    db.refresh(user)
    return user


def delete_user(db: Session, actor: User, user_id: str) -> None:
    authorize_manage_directory(actor)
    user = get_user_or_404(db, user_id)
    if user.id == actor.id:
        raise BadRequest("You cannot delete your own account")
    db.delete(user)
    db.commit()
    logger.info("user deleted id=%s by admin=%s", user_id, actor.id)


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    if payload.email and payload.email != user.email:
        if _email_taken(db, payload.email, exclude_user_id=user.id):
            raise Conflict("Email already exists")
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name.strip()

    _commit_or_conflict(db, "Email already exists")
    db.refresh(user)
    return user


# -------------------------
# CLASSES / SECTIONS
# -------------------------
def list_classes(db: Session) -> list[SchoolClass]:
    return db.query(SchoolClass).order_by(SchoolClass.name).all()


def create_class(db: Session, actor: User, payload: ClassCreate) -> SchoolClass:
    authorize_manage_directory(actor)
    if db.query(SchoolClass.id).filter(SchoolClass.name == payload.name).first():
        raise Conflict("Class name already exists")

    school_class = SchoolClass(name=payload.name)
    db.add(school_class)
    _commit_or_conflict(db, "Class name already exists")
    db.refresh(school_class)
    return school_class


def delete_class(db: Session, actor: User, class_id: str) -> None:
    authorize_manage_directory(actor)
    school_class = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if not school_class:
        raise NotFound("Class not found")
    db.delete(school_class)
    db.commit()


def list_sections(db: Session, class_id: str | None = None) -> list[Section]:
    query = db.query(Section).join(SchoolClass, Section.class_id == SchoolClass.id)
    if class_id:
        query = query.filter(Section.class_id == class_id)
    return query.order_by(SchoolClass.name, Section.name).all()


def create_section(db: Session, actor: User, payload: SectionCreate) -> Section:
    authorize_manage_directory(actor)
    if not db.query(SchoolClass.id).filter(SchoolClass.id == payload.class_id).first():
        raise NotFound("Class not found")

    name = payload.name.strip()
    exists = (
        db.query(Section.id)
        .filter(Section.class_id == payload.class_id, Section.name == name)
        .first()
    )
    if exists:
        raise Conflict("Section already exists in this class")

    section = Section(
        class_id=payload.class_id,
        name=name,
        display_name=(payload.display_name or "").strip() or f"Section {name}",
    )
    db.add(section)
    _commit_or_conflict(db, "Section already exists in this class")
    db.refresh(section)
    return section


def update_section(db: Session, actor: User, section_id: str, payload: SectionUpdate) -> Section:
    authorize_manage_directory(actor)
    section = db.query(Section).filter(Section.id == section_id).first()
    if not section:
        raise NotFound("Section not found")

    if payload.name is not None:
        section.name = payload.name.strip()
    if payload.display_name is not None:
        section.display_name = payload.display_name.strip() or f"Section {section.name}"

    _commit_or_conflict(db, "Section already exists in this class")
    db.refresh(section)
    return section


def delete_section(db: Session, actor: User, section_id: str) -> None:
    authorize_manage_directory(actor)
    section = db.query(Section).filter(Section.id == section_id).first()
    if not section:
        raise NotFound("Section not found")
    db.delete(section)
    db.commit()


# -------------------------
# FACULTY ASSIGNMENTS
# -------------------------
def _get_faculty_or_400(db: Session, faculty_id: str) -> User:
    faculty = db.query(User).filter(User.id == faculty_id).first()
    if not faculty or faculty.role != UserRole.faculty:
        raise BadRequest("Assignee must be a faculty user")
    return faculty


def assign_faculty_class(db: Session, actor: User, payload: FacultyClassAssignment) -> FacultyClass:
    authorize_manage_directory(actor)
    _get_faculty_or_400(db, payload.faculty_id)
    if not db.query(SchoolClass.id).filter(SchoolClass.id == payload.class_id).first():
        raise NotFound("Class not found")

    assignment = FacultyClass(faculty_id=payload.faculty_id, class_id=payload.class_id)
    db.add(assignment)
    _commit_or_conflict(db, "Faculty is already assigned to this class")
    db.refresh(assignment)
    return assignment


def remove_faculty_class(db: Session, actor: User, faculty_id: str, class_id: str) -> None:
    authorize_manage_directory(actor)
    assignment = (
        db.query(FacultyClass)
        .filter(FacultyClass.faculty_id == faculty_id, FacultyClass.class_id == class_id)
        .first()
    )
    if not assignment:
        raise NotFound("Assignment not found")
    db.delete(assignment)
    db.commit()


def assign_faculty_section(
    db: Session,
    actor: User,
    payload: FacultySectionAssignment,
) -> FacultySection:
    authorize_manage_directory(actor)
    _get_faculty_or_400(db, payload.faculty_id)
    if not db.query(Section.id).filter(Section.id == payload.section_id).first():
        raise NotFound("Section not found")

    assignment = FacultySection(faculty_id=payload.faculty_id, section_id=payload.section_id)
    db.add(assignment)
    _commit_or_conflict(db, "Faculty is already assigned to this section")
    db.refresh(assignment)
    return assignment


def remove_faculty_section(db: Session, actor: User, faculty_id: str, section_id: str) -> None:
    authorize_manage_directory(actor)
    assignment = (
        db.query(FacultySection)
        .filter(FacultySection.faculty_id == faculty_id, FacultySection.section_id == section_id)
        .first()
    )
    if not assignment:
        raise NotFound("Assignment not found")
    db.delete(assignment)
    db.commit()


# -------------------------
# FACULTY VIEWS
# -------------------------
def get_faculty_classes(db: Session, faculty: User) -> list[SchoolClass]:
    class_ids = get_faculty_class_ids(db, faculty.id)
    if not class_ids:
        return []
    return db.query(SchoolClass).filter(SchoolClass.id.in_(class_ids)).order_by(SchoolClass.name).all()


def get_faculty_class_sections(db: Session, faculty: User) -> list[Section]:
    class_ids = get_faculty_class_ids(db, faculty.id)
    if not class_ids:
        return []
    return (
        db.query(Section)
        .join(SchoolClass, Section.class_id == SchoolClass.id)
        .filter(Section.class_id.in_(class_ids))
        .order_by(SchoolClass.name, Section.name)
        .all()
    )


def get_faculty_students(db: Session, faculty: User) -> list[User]:
    class_ids = get_faculty_class_ids(db, faculty.id)
    if not class_ids:
        return []
    return (
        db.query(User)
        .filter(User.role == UserRole.student, User.class_id.in_(class_ids))
        .order_by(User.name)
        .all()
    )
