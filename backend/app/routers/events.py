"""Events 기능 API 라우터입니다. 공개 행사 조회와 참가 신청/취소를 제공합니다."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.event import EventOut, MyRegistrationOut, RegistrationOut
from app.services import event_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[EventOut])
def list_events(
    search: Optional[str] = None,
    time: Optional[Literal["upcoming", "past"]] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.list_published_events(
        db, current_user, search=search, time=time, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.get("/my-registrations", response_model=List[MyRegistrationOut])
def my_registrations(
    upcoming_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return event_service.list_user_registrations(db, current_user.user_id, upcoming_only=upcoming_only)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return event_service.get_event_for_user(db, event_id, current_user)


@router.post("/{event_id}/register", response_model=RegistrationOut)
def register(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return event_service.register(db, event_id, current_user)


@router.delete("/{event_id}/register", response_model=RegistrationOut)
def cancel_registration(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return event_service.cancel(db, event_id, current_user)
