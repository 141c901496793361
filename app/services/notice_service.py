import logging
import os
from typing import Iterable

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import BadRequest, NotFound
from app.models.notice_models import (
    ClassTarget,
    Notice,
    NoticeAttachment,
    NoticeRecipient,
    NoticeType,
    RecipientTarget,
)
from app.models.user_models import User
from app.schemas.notice_schemas import NoticeCreate, NoticeUpdate
from app.services.attachment_storage import AttachmentStorage, get_attachment_storage
from app.services.authorization_policy import authorize_create_notice, authorize_modify_notice
from app.services.recipient_resolver import build_targets, ensure_targets_exist
from app.services.visibility_service import ensure_can_view_notice, visible_notices_for

logger = logging.getLogger(__name__)


def _checked_targets(
    db: Session,
    actor: User,
    notice_type: NoticeType,
    rows: Iterable,
) -> list[RecipientTarget]:
    targets = build_targets(notice_type, rows)
    ensure_targets_exist(db, targets)
    authorize_create_notice(db, actor, notice_type, targets)
    return targets


def _target_rows(targets: list[RecipientTarget]) -> list[dict]:
    rows = []
    for target in targets:
        if isinstance(target, ClassTarget):
            rows.append({"class_id": target.class_id})
        else:
            rows.append({"section_id": target.section_id})
    return rows


def _remove_files(storage: AttachmentStorage, attachments: list[NoticeAttachment]) -> None:
    # metadata rows are deleted even when the file cannot be
    for attachment in attachments:
        try:
            storage.delete(attachment.file_path)
        except OSError:
            logger.exception("Error deleting attachment file %s", attachment.file_path)


# -------------------------
# CREATE
# -------------------------
def create_notice(db: Session, actor: User, payload: NoticeCreate) -> Notice:
    targets = _checked_targets(db, actor, payload.notice_type, payload.recipients)

    notice = Notice(
        title=payload.title,
        message=payload.message,
        notice_type=payload.notice_type,
        sent_by=str(actor.id),
    )
    notice.recipients = [NoticeRecipient.from_target(t) for t in targets]

    db.add(notice)
    db.commit()
    db.refresh(notice)

    logger.info(
        "notice created id=%s type=%s by user=%s targets=%d",
        notice.id,
        notice.notice_type.value,
        actor.id,
        len(targets),
    )
    return notice


# -------------------------
# READ
# -------------------------
def get_notice_or_404(db: Session, notice_id: str) -> Notice:
    notice = db.query(Notice).filter(Notice.id == notice_id).first()
    if not notice:
        raise NotFound("Notice not found")
    return notice


def get_notice_for_viewer(db: Session, viewer: User, notice_id: str) -> Notice:
    notice = get_notice_or_404(db, notice_id)
    ensure_can_view_notice(db, viewer, notice)
    return notice


def list_notices_for(db: Session, viewer: User, skip: int = 0, limit: int = 50) -> list[Notice]:
    return visible_notices_for(db, viewer, skip=skip, limit=limit)


def get_attachment_for_viewer(db: Session, viewer: User, notice_id: str, attachment_id: str) -> NoticeAttachment:
    notice = get_notice_for_viewer(db, viewer, notice_id)
    attachment = (
        db.query(NoticeAttachment)
        .filter(NoticeAttachment.id == attachment_id, NoticeAttachment.notice_id == notice.id)
        .first()
    )
    if not attachment:
        raise NotFound("Attachment not found")
    if not os.path.isfile(attachment.file_path):
        logger.warning("attachment %s missing on disk at %s", attachment.id, attachment.file_path)
        raise NotFound("Attachment file not found")
    return attachment


# -------------------------
# UPDATE
# -------------------------
def update_notice(db: Session, actor: User, notice_id: str, payload: NoticeUpdate) -> Notice:
    notice = get_notice_or_404(db, notice_id)
    authorize_modify_notice(actor, notice)

    if payload.title is not None:
        notice.title = payload.title
    if payload.message is not None:
        notice.message = payload.message

    current_type = NoticeType(notice.notice_type)
    type_changed = payload.notice_type is not None and payload.notice_type != current_type

    if type_changed or payload.recipients is not None:
        new_type = payload.notice_type or current_type
        rows = payload.recipients if payload.recipients is not None else _target_rows(notice.targets)
        targets = _checked_targets(db, actor, new_type, rows)

        notice.notice_type = new_type
        # replaced wholesale: old rows go first
        notice.recipients.clear()
        db.flush()
        notice.recipients.extend(NoticeRecipient.from_target(t) for t in targets)

    db.commit()
    db.refresh(notice)

    logger.info("notice updated id=%s by user=%s", notice.id, actor.id)
    return notice


# -------------------------
# DELETE
# -------------------------
def delete_notice(
    db: Session,
    actor: User,
    notice_id: str,
    storage: AttachmentStorage | None = None,
) -> None:
    notice = get_notice_or_404(db, notice_id)
    authorize_modify_notice(actor, notice)

    storage = storage or get_attachment_storage()
    attachments = list(notice.attachments)
    _remove_files(storage, attachments)
    for attachment in attachments:
        db.delete(attachment)

    db.delete(notice)
    db.commit()

    logger.info(
        "notice deleted id=%s by user=%s attachments=%d",
        notice_id,
        actor.id,
        len(attachments),
    )


# -------------------------
# ATTACHMENTS
# -------------------------
def add_attachments(
    db: Session,
    actor: User,
    notice_id: str,
    uploads: list[UploadFile],
    storage: AttachmentStorage | None = None,
) -> list[NoticeAttachment]:
    notice = get_notice_or_404(db, notice_id)
    authorize_modify_notice(actor, notice)

    if not uploads:
        raise BadRequest("No files uploaded")
    if len(uploads) > settings.MAX_ATTACHMENTS_PER_REQUEST:
        raise BadRequest(f"At most {settings.MAX_ATTACHMENTS_PER_REQUEST} files per upload")

    storage = storage or get_attachment_storage()
    stored = []
    try:
        for upload in uploads:
            stored.append(storage.save(upload))

        attachments = [
            NoticeAttachment(
                notice_id=notice.id,
                filename=item.filename,
                original_filename=item.original_filename,
                file_path=item.file_path,
                file_type=item.file_type,
                file_size=item.file_size,
            )
            for item in stored
        ]
        db.add_all(attachments)
        db.commit()
    except Exception:
        db.rollback()
        for item in stored:
            try:
                storage.delete(item.file_path)
            except OSError:
                logger.exception("Error deleting attachment file %s", item.file_path)
        raise

    for attachment in attachments:
        db.refresh(attachment)
    return attachments


def delete_attachment(
    db: Session,
    actor: User,
    attachment_id: str,
    storage: AttachmentStorage | None = None,
) -> None:
    attachment = db.query(NoticeAttachment).filter(NoticeAttachment.id == attachment_id).first()
    if not attachment:
        raise NotFound("Attachment not found")
    authorize_modify_notice(actor, attachment.notice)

    _remove_files(storage or get_attachment_storage(), [attachment])
    db.delete(attachment)
    db.commit()
