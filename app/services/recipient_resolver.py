# app/services/recipient_resolver.py
"""
Turns a notice's declared targeting into concrete data:

- ``build_targets`` validates raw recipient rows into ClassTarget / SectionTarget values
- ``validate_sender_scope`` checks a faculty sender against their assignments
- ``resolve_recipient_user_ids`` flattens a stored notice into the user ids entitled to it
"""

import logging
from typing import Any, Iterable

from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenScope, InvalidScope, NotFound
from app.models.class_models import FacultyClass, FacultySection, SchoolClass, Section
from app.models.notice_models import (
    ClassTarget,
    Notice,
    NoticeType,
    RecipientTarget,
    SectionTarget,
)
from app.models.user_models import User, UserRole

logger = logging.getLogger(__name__)


def _clean_id(value: Any) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    if cleaned == "" or cleaned.lower() in {"none", "null"}:
        return None
    return cleaned


def _row_value(row: Any, key: str) -> Any:
    if isinstance(row, dict):
        return row.get(key)
    return getattr(row, key, None)


# -------------------------
# TARGETS
# -------------------------
def build_targets(notice_type: NoticeType, rows: Iterable[Any] | None) -> list[RecipientTarget]:
    """ALL / FACULTY notices carry no targets; rows passed with them are dropped."""
    if not notice_type.is_targeted:
        return []

    targets: list[RecipientTarget] = []
    for row in rows or []:
        class_id = _clean_id(_row_value(row, "class_id"))
        section_id = _clean_id(_row_value(row, "section_id"))

        if (class_id is None) == (section_id is None):
            raise InvalidScope("Each recipient must set exactly one of class_id or section_id")

        target: RecipientTarget = ClassTarget(class_id) if class_id else SectionTarget(section_id)

        if notice_type == NoticeType.CLASS and not isinstance(target, ClassTarget):
            raise InvalidScope("CLASS notices can only target classes")
        if notice_type == NoticeType.SECTION and not isinstance(target, SectionTarget):
            raise InvalidScope("SECTION notices can only target sections")

        if target not in targets:
            targets.append(target)

    if not targets:
        raise InvalidScope(f"{notice_type.value} notices need at least one recipient")
    return targets


def ensure_targets_exist(db: Session, targets: list[RecipientTarget]) -> None:
    class_ids = {t.class_id for t in targets if isinstance(t, ClassTarget)}
    section_ids = {t.section_id for t in targets if isinstance(t, SectionTarget)}

    if class_ids:
        found = {cid for (cid,) in db.query(SchoolClass.id).filter(SchoolClass.id.in_(class_ids)).all()}
        missing = class_ids - found
        if missing:
            raise NotFound(f"Class not found: {sorted(missing)[0]}")

    if section_ids:
        found = {sid for (sid,) in db.query(Section.id).filter(Section.id.in_(section_ids)).all()}
        missing = section_ids - found
        if missing:
            raise NotFound(f"Section not found: {sorted(missing)[0]}")


# -------------------------
# FACULTY ASSIGNMENTS
# -------------------------
def get_faculty_class_ids(db: Session, faculty_id: str) -> set[str]:
    rows = db.query(FacultyClass.class_id).filter(FacultyClass.faculty_id == str(faculty_id)).all()
    return {class_id for (class_id,) in rows}


def get_faculty_section_ids(db: Session, faculty_id: str) -> set[str]:
    rows = db.query(FacultySection.section_id).filter(FacultySection.faculty_id == str(faculty_id)).all()
    return {section_id for (section_id,) in rows}


def get_section_ids_of_classes(db: Session, class_ids: set[str]) -> set[str]:
    if not class_ids:
        return set()
    rows = db.query(Section.id).filter(Section.class_id.in_(class_ids)).all()
    return {section_id for (section_id,) in rows}


def validate_sender_scope(
    db: Session,
    sender: User,
    notice_type: NoticeType,
    targets: list[RecipientTarget],
) -> None:
    """Faculty may only target their assigned classes (CLASS) or assigned sections (SECTION)."""
    if sender.role != UserRole.faculty or not notice_type.is_targeted:
        return

    if notice_type == NoticeType.CLASS:
        allowed = get_faculty_class_ids(db, sender.id)
        outside = [t for t in targets if isinstance(t, ClassTarget) and t.class_id not in allowed]
        if outside:
            raise ForbiddenScope("You can only send notices to your assigned classes")
        return

    allowed = get_faculty_section_ids(db, sender.id)
    outside = [t for t in targets if isinstance(t, SectionTarget) and t.section_id not in allowed]
    if outside:
        raise ForbiddenScope("You can only send notices to your assigned sections")


# -------------------------
# AUDIENCE
# -------------------------
def resolve_recipient_user_ids(db: Session, notice: Notice) -> set[str]:
    # the sender is always part of the audience
    user_ids = {str(notice.sent_by)}

    notice_type = NoticeType(notice.notice_type)
    query = db.query(User.id)

    if notice_type == NoticeType.ALL:
        pass
    elif notice_type == NoticeType.FACULTY:
        query = query.filter(User.role == UserRole.faculty)
    elif notice_type == NoticeType.CLASS:
        class_ids = {t.class_id for t in notice.targets if isinstance(t, ClassTarget)}
        if not class_ids:
            return user_ids
        query = query.filter(User.class_id.in_(class_ids))
    elif notice_type == NoticeType.SECTION:
        section_ids = {t.section_id for t in notice.targets if isinstance(t, SectionTarget)}
        if not section_ids:
            return user_ids
        query = query.filter(User.section_id.in_(section_ids))
    else:
        raise ValueError(f"Unknown notice type: {notice_type!r}")

    user_ids.update(user_id for (user_id,) in query.all())
    return user_ids
