from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.notice_schemas import AttachmentResponse, NoticeCreate, NoticeResponse, NoticeUpdate
from app.services.attachment_storage import AttachmentStorage, get_attachment_storage
from app.services.dependencies import get_current_staff
from app.services.notice_service import (
    add_attachments,
    create_notice,
    delete_attachment,
    delete_notice,
    get_notice_for_viewer,
    list_notices_for,
    update_notice,
)

router = APIRouter(prefix="/faculty", tags=["Notices (Faculty)"])


@router.get("/notices", response_model=list[NoticeResponse])
def get_notices_faculty(
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    return list_notices_for(db=db, viewer=faculty, skip=skip, limit=limit)


@router.get("/notices/{notice_id}", response_model=NoticeResponse)
def get_notice_by_id_faculty(
    notice_id: str,
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
):
    return get_notice_for_viewer(db=db, viewer=faculty, notice_id=notice_id)


@router.post("/notices", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
def upload_notice_faculty(
    payload: NoticeCreate,
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
):
    return create_notice(db=db, actor=faculty, payload=payload)


@router.api_route("/notices/{notice_id}", methods=["PUT", "PATCH"], response_model=NoticeResponse)
def update_my_notice_faculty(
    notice_id: str,
    payload: NoticeUpdate,
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
):
    return update_notice(db=db, actor=faculty, notice_id=notice_id, payload=payload)


@router.delete("/notices/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_notice_faculty(
    notice_id: str,
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    delete_notice(db=db, actor=faculty, notice_id=notice_id, storage=storage)
    return None


@router.post(
    "/notices/{notice_id}/attachments",
    response_model=list[AttachmentResponse],
    status_code=status.HTTP_201_CREATED,
)
def upload_attachments_faculty(
    notice_id: str,
    files: List[UploadFile] = File(...),
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    return add_attachments(db=db, actor=faculty, notice_id=notice_id, uploads=files, storage=storage)


@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attachment_faculty(
    attachment_id: str,
    faculty: User = Depends(get_current_staff),
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    delete_attachment(db=db, actor=faculty, attachment_id=attachment_id, storage=storage)
    return None
