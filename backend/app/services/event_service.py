"""Event Service 도메인 서비스 레이어입니다. 행사 관리와 참가 신청 흐름을 캡슐화합니다.

정원 확인은 ``events.registered_count`` 의 조건부 UPDATE 한 번으로 처리합니다.
``registered_count < max_participants`` 조건을 만족할 때만 1 증가하므로
마지막 한 자리에 동시에 신청이 들어와도 둘 중 하나만 성공합니다.
"""

import logging
from datetime import datetime
from typing import List

from fastapi import HTTPException, UploadFile
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.event import Event, EventRegistration
from app.models.user import User
from app.schemas.event import EventCreate, EventUpdate
from app.services import notification_service
from app.utils.helpers import delete_stored_file, public_url, save_image
from app.utils.permissions import ensure_admin, is_admin
from app.utils.workflow import (
    REGISTRATION_TRANSITIONS,
    RegistrationStatus,
    ensure_transition,
)

logger = logging.getLogger(__name__)

REGISTERED = RegistrationStatus.REGISTERED.value
ATTENDED = RegistrationStatus.ATTENDED.value
CANCELLED = RegistrationStatus.CANCELLED.value


def _get_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.event_id == int(event_id)).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event tidak ditemukan.")
    return event


def _get_visible_event(db: Session, event_id: int, current_user: User) -> Event:
    event = _get_event(db, event_id)
    if not event.is_published and not is_admin(current_user):
        raise HTTPException(status_code=404, detail="Event tidak ditemukan.")
    return event


def _registration_row(db: Session, event_id: int, user_id: int) -> EventRegistration | None:
    return (
        db.query(EventRegistration)
        .filter(
            EventRegistration.event_id == int(event_id),
            EventRegistration.user_id == int(user_id),
        )
        .first()
    )


def _is_active(row: EventRegistration | None) -> bool:
    return row is not None and row.status != CANCELLED


def is_full(event: Event) -> bool:
    if not event.max_participants:
        return False
    return int(event.registered_count or 0) >= int(event.max_participants)


def is_deadline_passed(event: Event, now: datetime | None = None) -> bool:
    now = now or datetime.now()
    return event.registration_deadline is not None and now > event.registration_deadline


def has_started(event: Event, now: datetime | None = None) -> bool:
    now = now or datetime.now()
    return event.event_date is not None and now > event.event_date


def is_registration_open(event: Event, now: datetime | None = None) -> bool:
    return bool(event.is_published) and not is_full(event) and not is_deadline_passed(event, now)


def registration_blocker(event: Event, registered: bool, now: datetime | None = None) -> str | None:
    if not event.is_published:
        return "Event tidak tersedia"
    if registered:
        return "Anda sudah terdaftar"
    if is_full(event):
        return "Kuota penuh"
    if is_deadline_passed(event, now):
        return "Pendaftaran ditutup"
    if has_started(event, now):
        return "Event sudah berlangsung"
    return None


def _reserve_slot(db: Session, event_id: int) -> bool:
    updated = (
        db.query(Event)
        .filter(
            Event.event_id == int(event_id),
            or_(
                Event.max_participants.is_(None),
                Event.registered_count < Event.max_participants,
            ),
        )
        .update({"registered_count": Event.registered_count + 1}, synchronize_session=False)
    )
    return updated == 1


def _release_slot(db: Session, event_id: int):
    db.query(Event).filter(
        Event.event_id == int(event_id),
        Event.registered_count > 0,
    ).update({"registered_count": Event.registered_count - 1}, synchronize_session=False)


def event_payload(event: Event, *, registered: bool | None = None) -> dict:
    payload = {
        "event_id": int(event.event_id),
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "image_url": public_url(event.image_path),
        "event_date": event.event_date,
        "registration_deadline": event.registration_deadline,
        "max_participants": event.max_participants,
        "registrations_count": int(event.registered_count or 0),
        "is_published": bool(event.is_published),
        "created_by": int(event.created_by),
        "creator_name": event.creator.name if event.creator is not None else None,
        "created_at": event.created_at,
    }
    if registered is not None:
        reason = registration_blocker(event, registered)
        payload.update(
            {
                "is_registered": registered,
                "is_registration_open": is_registration_open(event),
                "is_full": is_full(event),
                "can_register": reason is None,
                "reason": reason,
            }
        )
    return payload


def _registration_payload(row: EventRegistration) -> dict:
    return {
        "registration_id": int(row.registration_id),
        "event_id": int(row.event_id),
        "user_id": int(row.user_id),
        "status": row.status,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
        "user": row.user,
    }


def _active_event_ids(db: Session, user_id: int, event_ids: list[int]) -> set[int]:
    if not event_ids:
        return set()
    rows = (
        db.query(EventRegistration.event_id)
        .filter(
            EventRegistration.user_id == int(user_id),
            EventRegistration.event_id.in_(event_ids),
            EventRegistration.status != CANCELLED,
        )
        .all()
    )
    return {int(row[0]) for row in rows}


def _apply_search(query, search: str | None):
    if search and search.strip():
        like = f"%{search.strip()}%"
        query = query.filter(or_(Event.title.ilike(like), Event.location.ilike(like)))
    return query


def list_published_events(
    db: Session,
    current_user: User,
    search: str | None = None,
    time: str | None = None,
    skip: int = 0,
    limit: int = 12,
) -> List[dict]:
    query = _apply_search(db.query(Event).filter(Event.is_published == True), search)  # noqa: E712
    now = datetime.now()
    if time == "upcoming":
        query = query.filter(Event.event_date >= now)
    elif time == "past":
        query = query.filter(Event.event_date < now)
    rows = query.order_by(Event.event_date.desc(), Event.event_id.desc()).offset(skip).limit(limit).all()
    registered_ids = _active_event_ids(db, current_user.user_id, [int(row.event_id) for row in rows])
    return [event_payload(row, registered=int(row.event_id) in registered_ids) for row in rows]


def get_event_for_user(db: Session, event_id: int, current_user: User) -> dict:
    event = _get_visible_event(db, event_id, current_user)
    registered = _is_active(_registration_row(db, event.event_id, current_user.user_id))
    return event_payload(event, registered=registered)


def register(db: Session, event_id: int, current_user: User) -> dict:
    event = _get_visible_event(db, event_id, current_user)
    if not event.is_published:
        raise HTTPException(status_code=400, detail="Event tidak tersedia.")
    existing = _registration_row(db, event.event_id, current_user.user_id)
    if _is_active(existing):
        raise HTTPException(status_code=400, detail="Anda sudah terdaftar untuk event ini.")
    if is_deadline_passed(event):
        raise HTTPException(status_code=400, detail="Pendaftaran sudah ditutup.")
    if has_started(event):
        raise HTTPException(status_code=400, detail="Event sudah berlangsung.")
    if not _reserve_slot(db, event.event_id):
        db.rollback()
        raise HTTPException(status_code=400, detail="Kuota event sudah penuh.")

    if existing is not None:
        ensure_transition(REGISTRATION_TRANSITIONS, RegistrationStatus(existing.status), RegistrationStatus.REGISTERED)
        existing.status = REGISTERED
        row = existing
    else:
        row = EventRegistration(event_id=event.event_id, user_id=current_user.user_id, status=REGISTERED)
        db.add(row)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Anda sudah terdaftar untuk event ini.")

    notification_service.create_notification(
        db,
        user_id=current_user.user_id,
        noti_type="event_registration_confirmed",
        title="Pendaftaran event berhasil",
        message=f"Anda terdaftar untuk event \"{event.title}\".",
        link_url=f"/events/{event.event_id}",
        commit=False,
    )
    db.commit()
    db.refresh(row)
    logger.info(
        "[event] user registered user_id=%s event_id=%s title=%s",
        current_user.user_id, event.event_id, event.title,
    )
    return _registration_payload(row)


def cancel(db: Session, event_id: int, current_user: User) -> dict:
    event = _get_visible_event(db, event_id, current_user)
    row = _registration_row(db, event.event_id, current_user.user_id)
    if not _is_active(row):
        raise HTTPException(status_code=400, detail="Anda belum terdaftar untuk event ini.")
    if has_started(event):
        raise HTTPException(
            status_code=400,
            detail="Tidak dapat membatalkan pendaftaran untuk event yang sudah berlangsung.",
        )
    ensure_transition(REGISTRATION_TRANSITIONS, RegistrationStatus(row.status), RegistrationStatus.CANCELLED)
    row.status = CANCELLED
    _release_slot(db, event.event_id)
    db.commit()
    db.refresh(row)
    logger.info("[event] user cancelled user_id=%s event_id=%s", current_user.user_id, event.event_id)
    return _registration_payload(row)


def list_user_registrations(db: Session, user_id: int, upcoming_only: bool = False) -> List[dict]:
    query = (
        db.query(EventRegistration, Event)
        .join(Event, Event.event_id == EventRegistration.event_id)
        .filter(
            EventRegistration.user_id == int(user_id),
            EventRegistration.status != CANCELLED,
            Event.is_published == True,  # noqa: E712
        )
    )
    if upcoming_only:
        query = query.filter(Event.event_date >= datetime.now())
    rows = query.order_by(Event.event_date.asc()).all()
    return [
        {
            "registration_id": int(reg.registration_id),
            "status": reg.status,
            "event": event_payload(event, registered=True),
        }
        for reg, event in rows
    ]


# ---- admin -------------------------------------------------------------


def admin_list_events(
    db: Session,
    current_user: User,
    search: str | None = None,
    status: str | None = None,
    skip: int = 0,
    limit: int = 12,
) -> List[dict]:
    ensure_admin(current_user)
    query = _apply_search(db.query(Event), search)
    if status == "published":
        query = query.filter(Event.is_published == True)  # noqa: E712
    elif status == "draft":
        query = query.filter(Event.is_published == False)  # noqa: E712
    rows = query.order_by(Event.event_date.desc(), Event.event_id.desc()).offset(skip).limit(limit).all()
    return [event_payload(row) for row in rows]


def _notify_published(db: Session, event: Event, actor: User):
    notification_service.notify_alumni(
        db,
        noti_type="event_published",
        title="Event baru",
        message=f"Event \"{event.title}\" telah dipublikasikan.",
        link_url=f"/events/{event.event_id}",
        exclude_user_id=actor.user_id,
    )


def create_event(db: Session, data: EventCreate, current_user: User) -> dict:
    ensure_admin(current_user)
    event = Event(**data.model_dump(), created_by=current_user.user_id, registered_count=0)
    db.add(event)
    db.commit()
    db.refresh(event)
    if event.is_published:
        _notify_published(db, event, current_user)
    logger.info("[event] created event_id=%s published=%s", event.event_id, event.is_published)
    return event_payload(event)


def update_event(db: Session, event_id: int, data: EventUpdate, current_user: User) -> dict:
    ensure_admin(current_user)
    event = _get_event(db, event_id)
    payload = data.model_dump()
    next_max = payload.get("max_participants")
    if next_max is not None and next_max < int(event.registered_count or 0):
        raise HTTPException(
            status_code=400,
            detail="Kuota tidak boleh lebih kecil dari jumlah peserta terdaftar.",
        )
    was_published = bool(event.is_published)
    for k, v in payload.items():
        setattr(event, k, v)
    db.commit()
    db.refresh(event)
    if event.is_published and not was_published:
        _notify_published(db, event, current_user)
    return event_payload(event)


async def upload_event_image(db: Session, event_id: int, file: UploadFile, current_user: User) -> dict:
    ensure_admin(current_user)
    event = _get_event(db, event_id)
    new_path = await save_image(file, subfolder="event-images")
    old_path = event.image_path
    event.image_path = new_path
    db.commit()
    db.refresh(event)
    delete_stored_file(old_path)
    return event_payload(event)


def delete_event(db: Session, event_id: int, current_user: User):
    ensure_admin(current_user)
    event = _get_event(db, event_id)
    image_path = event.image_path
    db.delete(event)
    db.commit()
    delete_stored_file(image_path)
    logger.info("[event] deleted event_id=%s by=%s", event_id, current_user.user_id)


def list_registrations(db: Session, event_id: int, current_user: User) -> List[dict]:
    ensure_admin(current_user)
    _get_event(db, event_id)
    rows = (
        db.query(EventRegistration)
        .filter(EventRegistration.event_id == int(event_id))
        .order_by(EventRegistration.created_at.desc(), EventRegistration.registration_id.desc())
        .all()
    )
    return [_registration_payload(row) for row in rows]


def set_registration_status(
    db: Session,
    event_id: int,
    user_id: int,
    status: RegistrationStatus,
    current_user: User,
) -> dict:
    ensure_admin(current_user)
    event = _get_event(db, event_id)
    row = _registration_row(db, event.event_id, user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Pendaftaran tidak ditemukan.")
    current = RegistrationStatus(row.status)
    if current == status:
        return _registration_payload(row)
    ensure_transition(REGISTRATION_TRANSITIONS, current, status)

    if current == RegistrationStatus.CANCELLED:
        if not _reserve_slot(db, event.event_id):
            db.rollback()
            raise HTTPException(status_code=400, detail="Kuota event sudah penuh.")
    elif status == RegistrationStatus.CANCELLED:
        _release_slot(db, event.event_id)

    row.status = status.value
    notification_service.create_notification(
        db,
        user_id=int(row.user_id),
        noti_type="event_registration_status_changed",
        title="Status pendaftaran event diperbarui",
        message=f"Status pendaftaran Anda untuk \"{event.title}\" sekarang: {status.value}.",
        link_url=f"/events/{event.event_id}",
        commit=False,
    )
    db.commit()
    db.refresh(row)
    logger.info(
        "[event] registration status event_id=%s user_id=%s %s->%s by=%s",
        event.event_id, user_id, current.value, status.value, current_user.user_id,
    )
    return _registration_payload(row)
