import logging

from sqlalchemy import desc, or_, select
from sqlalchemy.orm import Session

from app.core.exceptions import BadRequest, NotFound
from app.models.notice_models import Notice
from app.models.reply_models import Reply, ReplyRecipient, ReplyType
from app.models.user_models import User
from app.schemas.reply_schemas import ReplyCreate, ReplyUpdate
from app.services.authorization_policy import (
    authorize_create_reply,
    authorize_delete_reply,
    authorize_update_reply,
)
from app.services.recipient_resolver import resolve_recipient_user_ids
from app.services.visibility_service import ensure_can_view_notice

logger = logging.getLogger(__name__)


# -------------------------
# FAN-OUT
# -------------------------
def compute_reply_recipient_ids(
    db: Session,
    notice: Notice,
    sender_id: str,
    reply_type: ReplyType,
) -> set[str]:
    """REPLY goes to the notice's sender only; REPLY_ALL to the notice's whole audience.

    The replying user is never one of their own recipients.
    """
    sender_id = str(sender_id)

    if reply_type == ReplyType.REPLY:
        recipients = {str(notice.sent_by)}
    elif reply_type == ReplyType.REPLY_ALL:
        recipients = resolve_recipient_user_ids(db, notice)
    else:
        raise ValueError(f"Unknown reply type: {reply_type!r}")

    recipients.discard(sender_id)
    return recipients


# -------------------------
# CREATE
# -------------------------
def get_reply_or_404(db: Session, reply_id: str) -> Reply:
    reply = db.query(Reply).filter(Reply.id == reply_id).first()
    if not reply:
        raise NotFound("Reply not found")
    return reply


def create_reply(db: Session, sender: User, payload: ReplyCreate) -> Reply:
    notice = db.query(Notice).filter(Notice.id == payload.notice_id).first()
    if not notice:
        raise NotFound("Notice not found")

    ensure_can_view_notice(db, sender, notice)
    authorize_create_reply(sender, notice)

    if payload.parent_reply_id:
        parent = db.query(Reply).filter(Reply.id == payload.parent_reply_id).first()
        if not parent or parent.notice_id != notice.id:
            raise BadRequest("Parent reply does not belong to this notice")

    recipient_ids = compute_reply_recipient_ids(db, notice, sender.id, payload.reply_type)

    reply = Reply(
        notice_id=notice.id,
        sender_id=str(sender.id),
        message=payload.message,
        reply_type=payload.reply_type,
        parent_reply_id=payload.parent_reply_id,
    )
    reply.recipients = [ReplyRecipient(user_id=user_id) for user_id in sorted(recipient_ids)]

    db.add(reply)
    db.commit()
    db.refresh(reply)

    logger.info(
        "reply created id=%s notice=%s type=%s recipients=%d",
        reply.id,
        notice.id,
        reply.reply_type.value,
        len(recipient_ids),
    )
    return reply


# -------------------------
# READ
# -------------------------
def viewable_replies_for(db: Session, notice: Notice, user: User) -> list[Reply]:
    """Replies of the notice the user sent, received, or (as the notice's sender) all of them.

    Oldest first, in thread order.
    """
    query = db.query(Reply).filter(Reply.notice_id == notice.id)

    if str(notice.sent_by) != str(user.id):
        received = select(ReplyRecipient.reply_id).where(ReplyRecipient.user_id == str(user.id))
        query = query.filter(or_(Reply.sender_id == str(user.id), Reply.id.in_(received)))

    return query.order_by(Reply.created_at.asc(), Reply.id.asc()).all()


def get_notice_replies(db: Session, user: User, notice_id: str) -> list[Reply]:
    notice = db.query(Notice).filter(Notice.id == notice_id).first()
    if not notice:
        raise NotFound("Notice not found")
    ensure_can_view_notice(db, user, notice)
    return viewable_replies_for(db, notice, user)


def user_replies(db: Session, user: User, skip: int = 0, limit: int = 50) -> list[Reply]:
    received = select(ReplyRecipient.reply_id).where(ReplyRecipient.user_id == str(user.id))
    return (
        db.query(Reply)
        .filter(or_(Reply.sender_id == str(user.id), Reply.id.in_(received)))
        .order_by(desc(Reply.created_at), desc(Reply.id))
        .offset(skip)
        .limit(limit)
        .all()
    )


def unread_count(db: Session, user: User) -> int:
    return (
        db.query(ReplyRecipient)
        .filter(ReplyRecipient.user_id == str(user.id), ReplyRecipient.is_read.is_(False))
        .count()
    )


# -------------------------
# UPDATE / DELETE
# -------------------------
def update_reply(db: Session, user: User, reply_id: str, payload: ReplyUpdate) -> Reply:
    reply = get_reply_or_404(db, reply_id)
    authorize_update_reply(user, reply)

    reply.message = payload.message
    db.commit()
    db.refresh(reply)
    return reply


def delete_reply(db: Session, user: User, reply_id: str) -> None:
    reply = get_reply_or_404(db, reply_id)
    authorize_delete_reply(user, reply)

    db.delete(reply)
    db.commit()
    logger.info("reply deleted id=%s by user=%s", reply_id, user.id)


def mark_read(db: Session, reply: Reply, user: User) -> None:
    """Marks the user's recipient row read; silently does nothing when there is none."""
    row = (
        db.query(ReplyRecipient)
        .filter(ReplyRecipient.reply_id == reply.id, ReplyRecipient.user_id == str(user.id))
        .first()
    )
    if row is None or row.is_read:
        return
    row.is_read = True
    db.commit()


def mark_reply_read(db: Session, user: User, reply_id: str) -> None:
    mark_read(db, get_reply_or_404(db, reply_id), user)
