"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(150), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="alumni")  # admin/alumni
    angkatan = Column(String(4))  # 졸업 기수(연도)
    profesi = Column(String(150))
    bio = Column(Text)
    profile_picture = Column(String(500))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    # Relationships
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    event_registrations = relationship(
        "EventRegistration",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    galleries = relationship("Gallery", foreign_keys="Gallery.user_id", back_populates="owner")
    forum_discussions = relationship("ForumDiscussion", back_populates="author")
    forum_replies = relationship("ForumReply", back_populates="author")
    articles = relationship("Article", back_populates="author")

    __table_args__ = (
        Index("idx_users_role_angkatan", "role", "angkatan"),
    )
