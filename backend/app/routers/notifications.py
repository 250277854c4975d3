"""Notifications 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.notification import NotificationOut, UnreadNotificationsOut
from app.services import notification_service
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(
        db, current_user.user_id, unread_only, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.get("/unread", response_model=UnreadNotificationsOut)
def unread(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return notification_service.get_unread(db, current_user.user_id)


@router.patch("/{noti_id}/read", response_model=NotificationOut)
def mark_read(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return notification_service.mark_read(db, noti_id, current_user.user_id)


@router.post("/read-all")
def mark_all_read(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    updated = notification_service.mark_all_read(db, current_user.user_id)
    return {"message": "Semua notifikasi telah ditandai dibaca.", "updated": updated}


@router.delete("/{noti_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(noti_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    notification_service.delete_notification(db, noti_id, current_user.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("")
def delete_all(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    deleted = notification_service.delete_all(db, current_user.user_id)
    return {"message": "Semua notifikasi telah dihapus.", "deleted": deleted}
