"""Notification Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session
from app.models.notification import Notification
from app.models.user import User
from app.utils.permissions import ADMIN, ALUMNI
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


def get_notifications(
    db: Session,
    user_id: int,
    unread_only: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return (
        q.order_by(Notification.created_at.desc(), Notification.noti_id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_unread(db: Session, user_id: int, limit: int = 10) -> dict:
    q = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    )
    return {
        "notifications": q.order_by(Notification.created_at.desc(), Notification.noti_id.desc()).limit(limit).all(),
        "unread_count": q.count(),
    }


def _get_own(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = db.query(Notification).filter(
        Notification.noti_id == noti_id,
        Notification.user_id == user_id,
    ).first()
    if not noti:
        raise HTTPException(status_code=404, detail="Notifikasi tidak ditemukan.")
    return noti


def mark_read(db: Session, noti_id: int, user_id: int) -> Notification:
    noti = _get_own(db, noti_id, user_id)
    noti.is_read = True
    db.commit()
    db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update({"is_read": True})
    db.commit()
    return int(updated)


def delete_notification(db: Session, noti_id: int, user_id: int):
    noti = _get_own(db, noti_id, user_id)
    db.delete(noti)
    db.commit()


def delete_all(db: Session, user_id: int) -> int:
    deleted = db.query(Notification).filter(Notification.user_id == user_id).delete()
    db.commit()
    return int(deleted)


def create_notification(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link_url: Optional[str] = None,
    commit: bool = True,
) -> Notification:
    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link_url=link_url,
    )
    db.add(noti)
    if commit:
        db.commit()
        db.refresh(noti)
    else:
        db.flush()
    return noti


def notify_users(
    db: Session,
    user_ids: Iterable[int],
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link_url: Optional[str] = None,
    exclude_user_id: Optional[int] = None,
) -> int:
    sent = 0
    seen = set()
    for user_id in user_ids:
        target = int(user_id)
        if target in seen or (exclude_user_id is not None and target == int(exclude_user_id)):
            continue
        seen.add(target)
        create_notification(db, target, noti_type, title, message, link_url, commit=False)
        sent += 1
    db.commit()
    logger.info("[notification] %s fan-out to %s users", noti_type, sent)
    return sent


def _active_user_ids(db: Session, role: str) -> list[int]:
    rows = db.query(User.user_id).filter(User.role == role, User.is_active == True).all()  # noqa: E712
    return [int(row[0]) for row in rows]


def notify_admins(db: Session, noti_type: str, title: str, message: Optional[str] = None,
                  link_url: Optional[str] = None, exclude_user_id: Optional[int] = None) -> int:
    return notify_users(db, _active_user_ids(db, ADMIN), noti_type, title, message, link_url, exclude_user_id)


def notify_alumni(db: Session, noti_type: str, title: str, message: Optional[str] = None,
                  link_url: Optional[str] = None, exclude_user_id: Optional[int] = None) -> int:
    return notify_users(db, _active_user_ids(db, ALUMNI), noti_type, title, message, link_url, exclude_user_id)
