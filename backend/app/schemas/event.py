"""Event 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime

from app.utils.workflow import RegistrationStatus
from app.schemas.user import UserBrief


class EventBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: Optional[str] = Field(None, max_length=255)
    event_date: datetime
    registration_deadline: Optional[datetime] = None
    max_participants: Optional[int] = Field(None, ge=1)
    is_published: bool = False

    @model_validator(mode="after")
    def _deadline_before_event(self):
        if self.registration_deadline is not None and self.registration_deadline >= self.event_date:
            raise ValueError("registration_deadline must be before event_date")
        return self


class EventCreate(EventBase):
    pass


class EventUpdate(EventBase):
    pass


class EventOut(BaseModel):
    event_id: int
    title: str
    description: str
    location: Optional[str]
    image_url: Optional[str] = None
    event_date: datetime
    registration_deadline: Optional[datetime]
    max_participants: Optional[int]
    registrations_count: int = 0
    is_published: bool
    created_by: int
    creator_name: Optional[str] = None
    created_at: datetime
    is_registered: Optional[bool] = None
    is_registration_open: Optional[bool] = None
    is_full: Optional[bool] = None
    can_register: Optional[bool] = None
    reason: Optional[str] = None


class RegistrationOut(BaseModel):
    registration_id: int
    event_id: int
    user_id: int
    status: RegistrationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserBrief] = None

    model_config = {"from_attributes": True}


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus


class MyRegistrationOut(BaseModel):
    registration_id: int
    status: RegistrationStatus
    event: EventOut
