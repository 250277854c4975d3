"""Gallery 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Gallery(Base):
    __tablename__ = "galleries"

    gallery_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    image_path = Column(String(500), nullable=False)
    batch = Column(String(4))  # 앨범 기수(angkatan)
    type = Column(String(20), nullable=False, default="personal")  # personal/public
    status = Column(String(20), nullable=False, default="pending")  # pending/approved/rejected
    rejection_reason = Column(Text)
    approved_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    approved_at = Column(DateTime)
    views_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())
    deleted_at = Column(DateTime)

    owner = relationship("User", foreign_keys=[user_id], back_populates="galleries")
    approver = relationship("User", foreign_keys=[approved_by])

    __table_args__ = (
        Index("idx_gallery_type_status", "type", "status", "created_at"),
        Index("idx_gallery_user", "user_id"),
    )
