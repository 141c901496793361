# app/services/visibility_service.py

import enum
from dataclasses import dataclass

from sqlalchemy import and_, desc, or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDenied
from app.models.notice_models import ClassTarget, Notice, NoticeRecipient, NoticeType, SectionTarget
from app.models.user_models import User, UserRole
from app.services.recipient_resolver import (
    get_faculty_class_ids,
    get_faculty_section_ids,
    get_section_ids_of_classes,
)


class FacultySectionVisibility(str, enum.Enum):
    # SECTION notices whose section belongs to one of the faculty's classes
    CLASS_MEMBERSHIP = "class_membership"
    # SECTION notices for sections explicitly assigned to the faculty
    ASSIGNED_SECTIONS = "assigned_sections"


def default_section_policy() -> FacultySectionVisibility:
    return FacultySectionVisibility(settings.FACULTY_SECTION_VISIBILITY)


@dataclass(frozen=True)
class ViewerScope:
    user_id: str
    role: UserRole
    class_ids: frozenset
    section_ids: frozenset


def build_viewer_scope(
    db: Session,
    user: User,
    section_policy: FacultySectionVisibility | None = None,
) -> ViewerScope:
    role = UserRole(user.role)

    if role == UserRole.student:
        class_ids = {user.class_id} if user.class_id else set()
        section_ids = {user.section_id} if user.section_id else set()
    elif role == UserRole.faculty:
        policy = section_policy or default_section_policy()
        class_ids = get_faculty_class_ids(db, user.id)
        if policy == FacultySectionVisibility.CLASS_MEMBERSHIP:
            section_ids = get_section_ids_of_classes(db, class_ids)
        else:
            section_ids = get_faculty_section_ids(db, user.id)
    else:
        class_ids, section_ids = set(), set()

    return ViewerScope(
        user_id=str(user.id),
        role=role,
        class_ids=frozenset(class_ids),
        section_ids=frozenset(section_ids),
    )


def _visibility_clause(scope: ViewerScope):
    clauses = [Notice.notice_type == NoticeType.ALL]

    if scope.role == UserRole.faculty:
        clauses.append(Notice.notice_type == NoticeType.FACULTY)
        clauses.append(Notice.sent_by == scope.user_id)

    if scope.class_ids:
        clauses.append(
            and_(
                Notice.notice_type == NoticeType.CLASS,
                Notice.id.in_(
                    select(NoticeRecipient.notice_id).where(NoticeRecipient.class_id.in_(scope.class_ids))
                ),
            )
        )

    if scope.section_ids:
        clauses.append(
            and_(
                Notice.notice_type == NoticeType.SECTION,
                Notice.id.in_(
                    select(NoticeRecipient.notice_id).where(NoticeRecipient.section_id.in_(scope.section_ids))
                ),
            )
        )

    return or_(*clauses)


def _visible_query(db: Session, scope: ViewerScope):
    query = db.query(Notice)
    if scope.role != UserRole.admin:
        query = query.filter(_visibility_clause(scope))
    return query


def visible_notices_for(
    db: Session,
    user: User,
    skip: int = 0,
    limit: int | None = None,
    section_policy: FacultySectionVisibility | None = None,
) -> list[Notice]:
    """Notices the user may read, newest first. Admins see everything."""
    scope = build_viewer_scope(db, user, section_policy)
    query = _visible_query(db, scope).order_by(desc(Notice.created_at), desc(Notice.id)).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_visible_notices(
    db: Session,
    user: User,
    section_policy: FacultySectionVisibility | None = None,
) -> int:
    scope = build_viewer_scope(db, user, section_policy)
    return _visible_query(db, scope).count()


def notice_visible_to(scope: ViewerScope, notice: Notice) -> bool:
    if scope.role == UserRole.admin:
        return True

    notice_type = NoticeType(notice.notice_type)
    if notice_type == NoticeType.ALL:
        return True

    if scope.role == UserRole.faculty:
        if notice_type == NoticeType.FACULTY or str(notice.sent_by) == scope.user_id:
            return True

    if notice_type == NoticeType.CLASS:
        return any(
            isinstance(t, ClassTarget) and t.class_id in scope.class_ids for t in notice.targets
        )
    if notice_type == NoticeType.SECTION:
        return any(
            isinstance(t, SectionTarget) and t.section_id in scope.section_ids for t in notice.targets
        )
    return False


def can_view_notice(
    db: Session,
    user: User,
    notice: Notice,
    section_policy: FacultySectionVisibility | None = None,
) -> bool:
    return notice_visible_to(build_viewer_scope(db, user, section_policy), notice)


def ensure_can_view_notice(
    db: Session,
    user: User,
    notice: Notice,
    section_policy: FacultySectionVisibility | None = None,
) -> None:
    if not can_view_notice(db, user, notice, section_policy):
        raise AccessDenied("Access denied to this notice")
