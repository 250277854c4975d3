"""관리자용 행사 관리 API 라우터입니다."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.user import User
from app.schemas.event import (
    EventCreate, EventOut, EventUpdate, RegistrationOut, RegistrationStatusUpdate,
)
from app.services import event_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/admin/events", tags=["admin-events"])


@router.get("", response_model=List[EventOut])
def list_events(
    search: Optional[str] = None,
    status: Optional[Literal["published", "draft"]] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return event_service.admin_list_events(
        db, current_user, search=search, status=status, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.post("", response_model=EventOut, status_code=201)
def create_event(data: EventCreate, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return event_service.create_event(db, data, current_user)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    data: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return event_service.update_event(db, event_id, data, current_user)


@router.post("/{event_id}/image", response_model=EventOut)
async def upload_image(
    event_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return await event_service.upload_event_image(db, event_id, file, current_user)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    event_service.delete_event(db, event_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/registrations", response_model=List[RegistrationOut])
def list_registrations(event_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return event_service.list_registrations(db, event_id, current_user)


@router.patch("/{event_id}/registrations/{user_id}", response_model=RegistrationOut)
def set_registration_status(
    event_id: int,
    user_id: int,
    data: RegistrationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return event_service.set_registration_status(db, event_id, user_id, data.status, current_user)
