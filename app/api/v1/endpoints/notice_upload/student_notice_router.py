from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.notice_schemas import NoticeResponse
from app.services.dependencies import get_current_user
from app.services.notice_service import (
    get_attachment_for_viewer,
    get_notice_for_viewer,
    list_notices_for,
)

router = APIRouter(prefix="/student/notices", tags=["Notices (Student)"])


@router.get("", response_model=list[NoticeResponse])
def get_my_notices_student(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    return list_notices_for(db=db, viewer=user, skip=skip, limit=limit)


@router.get("/{notice_id}", response_model=NoticeResponse)
def get_notice_by_id_student(
    notice_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_notice_for_viewer(db=db, viewer=user, notice_id=notice_id)


@router.get("/{notice_id}/attachments/{attachment_id}")
def download_attachment_student(
    notice_id: str,
    attachment_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    attachment = get_attachment_for_viewer(
        db=db, viewer=user, notice_id=notice_id, attachment_id=attachment_id
    )
    return FileResponse(
        attachment.file_path,
        media_type=attachment.file_type or "application/octet-stream",
        filename=attachment.original_filename,
    )
