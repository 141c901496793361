# app/services/authorization_policy.py
"""
Single decision point consulted before every mutation.

Each ``authorize_*`` function returns None when the action is allowed and
raises ForbiddenRole / ForbiddenScope / ForbiddenOwnership otherwise.
"""

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import AccessDenied, ForbiddenOwnership, ForbiddenRole
from app.models.notice_models import Notice, NoticeType, RecipientTarget
from app.models.reply_models import Reply
from app.models.user_models import User, UserRole
from app.services.recipient_resolver import validate_sender_scope

logger = logging.getLogger(__name__)


def _deny(actor: User, action: str, exc: AccessDenied) -> AccessDenied:
    logger.info(
        "denied action=%s user=%s role=%s reason=%s",
        action,
        actor.id,
        getattr(actor.role, "value", actor.role),
        type(exc).__name__,
    )
    return exc


def authorize_manage_directory(actor: User) -> None:
    """Users, classes, sections and faculty assignments are admin-only."""
    if actor.role != UserRole.admin:
        raise _deny(actor, "manage_directory", ForbiddenRole("Admin access required"))


def authorize_create_notice(
    db: Session,
    actor: User,
    notice_type: NoticeType,
    targets: list[RecipientTarget],
) -> None:
    if actor.role == UserRole.admin:
        return
    if actor.role != UserRole.faculty:
        raise _deny(actor, "create_notice", ForbiddenRole("Only admin and faculty can send notices"))
    if not notice_type.is_targeted:
        raise _deny(
            actor,
            "create_notice",
            ForbiddenRole("Faculty can only send CLASS or SECTION notices"),
        )
    try:
        validate_sender_scope(db, actor, notice_type, targets)
    except AccessDenied as exc:
        raise _deny(actor, "create_notice", exc)


def authorize_modify_notice(actor: User, notice: Notice) -> None:
    """Update and delete share the same rule: admin, or the faculty member who sent it."""
    if actor.role == UserRole.admin:
        return
    if actor.role != UserRole.faculty:
        raise _deny(actor, "modify_notice", ForbiddenRole("Only admin and faculty can modify notices"))
    if str(notice.sent_by) != str(actor.id):
        raise _deny(actor, "modify_notice", ForbiddenOwnership("You can only modify your own notices"))


def authorize_create_reply(actor: User, notice: Notice) -> None:
    if str(notice.sent_by) == str(actor.id):
        raise _deny(actor, "create_reply", ForbiddenOwnership("You cannot reply to your own notice"))


def authorize_update_reply(actor: User, reply: Reply) -> None:
    if str(reply.sender_id) != str(actor.id):
        raise _deny(actor, "update_reply", ForbiddenOwnership("You can only edit your own replies"))


def authorize_delete_reply(actor: User, reply: Reply) -> None:
    if actor.role == UserRole.admin:
        return
    if str(reply.sender_id) == str(actor.id):
        return
    if reply.notice is not None and str(reply.notice.sent_by) == str(actor.id):
        return
    raise _deny(
        actor,
        "delete_reply",
        ForbiddenOwnership("You don't have permission to delete this reply"),
    )
