"""Event 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import (
    CheckConstraint, Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255))
    image_path = Column(String(500))
    event_date = Column(DateTime, nullable=False)
    registration_deadline = Column(DateTime)
    max_participants = Column(Integer)  # NULL이면 정원 제한 없음
    # 취소되지 않은 신청 수. 정원 확인은 이 컬럼의 조건부 증가로 처리한다.
    registered_count = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, default=False)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    creator = relationship("User")
    registrations = relationship("EventRegistration", back_populates="event", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("registered_count >= 0", name="ck_events_registered_count"),
        Index("idx_events_published_date", "is_published", "event_date"),
    )


class EventRegistration(Base):
    __tablename__ = "event_registrations"

    registration_id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default="registered")  # registered/attended/cancelled
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="registrations")
    user = relationship("User", back_populates="event_registrations")

    __table_args__ = (
        # 취소 후 재신청은 같은 행을 재사용한다.
        UniqueConstraint("event_id", "user_id", name="uq_event_registration_event_user"),
        Index("idx_event_registration_status", "event_id", "status"),
    )
