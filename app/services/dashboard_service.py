from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.class_models import SchoolClass, Section
from app.models.notice_models import Notice, NoticeType
from app.models.user_models import User, UserRole
from app.schemas.dashboard_schemas import (
    AdminDashboard,
    FacultyDashboard,
    NoticeStats,
    StudentDashboard,
    UserStats,
)
from app.schemas.user_schemas import UserResponse
from app.services.authorization_policy import authorize_manage_directory
from app.services.directory_service import get_faculty_students
from app.services.recipient_resolver import get_faculty_class_ids
from app.services.visibility_service import count_visible_notices


def admin_dashboard(db: Session, actor: User) -> AdminDashboard:
    authorize_manage_directory(actor)

    role_counts = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())
    users = UserStats(**{role.value: role_counts.get(role, 0) for role in UserRole})

    type_counts = dict(
        db.query(Notice.notice_type, func.count(Notice.id)).group_by(Notice.notice_type).all()
    )
    notices = NoticeStats(
        total=sum(type_counts.values()),
        all=type_counts.get(NoticeType.ALL, 0),
        faculty=type_counts.get(NoticeType.FACULTY, 0),
        class_=type_counts.get(NoticeType.CLASS, 0),
        section=type_counts.get(NoticeType.SECTION, 0),
    )

    return AdminDashboard(
        users=users,
        notices=notices,
        total_classes=db.query(SchoolClass).count(),
        total_sections=db.query(Section).count(),
    )


def faculty_dashboard(db: Session, faculty: User) -> FacultyDashboard:
    return FacultyDashboard(
        my_notices=count_visible_notices(db, faculty),
        my_classes=len(get_faculty_class_ids(db, faculty.id)),
        total_students=len(get_faculty_students(db, faculty)),
    )


def student_dashboard(db: Session, student: User) -> StudentDashboard:
    return StudentDashboard(
        available_notices=count_visible_notices(db, student),
        user_info=UserResponse.model_validate(student),
    )
