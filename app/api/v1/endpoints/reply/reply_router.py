from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.database import get_db
from app.models.user_models import User
from app.schemas.reply_schemas import MyRepliesResponse, ReplyCreate, ReplyResponse, ReplyUpdate
from app.services.dependencies import get_current_user
from app.services.reply_service import (
    create_reply,
    delete_reply,
    get_notice_replies,
    mark_reply_read,
    unread_count,
    update_reply,
    user_replies,
)

router = APIRouter(prefix="/replies", tags=["Replies"])


@router.post("", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED)
def add_reply(
    payload: ReplyCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return create_reply(db=db, sender=user, payload=payload)


@router.get("/notice/{notice_id}", response_model=list[ReplyResponse])
def get_replies_of_notice(
    notice_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_notice_replies(db=db, user=user, notice_id=notice_id)


@router.get("/my-replies", response_model=MyRepliesResponse)
def get_my_replies(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    return {
        "replies": user_replies(db=db, user=user, skip=skip, limit=limit),
        "unread_count": unread_count(db=db, user=user),
    }


@router.put("/{reply_id}", response_model=ReplyResponse)
def edit_reply(
    reply_id: str,
    payload: ReplyUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return update_reply(db=db, user=user, reply_id=reply_id, payload=payload)


@router.delete("/{reply_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_reply(
    reply_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    delete_reply(db=db, user=user, reply_id=reply_id)
    return None


@router.api_route("/{reply_id}/mark-read", methods=["POST", "PATCH"])
def read_reply(
    reply_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    mark_reply_read(db=db, user=user, reply_id=reply_id)
    return {"message": "Reply marked as read"}
