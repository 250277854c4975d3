"""Forum 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class ForumCategory(Base):
    __tablename__ = "forum_categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text)
    icon = Column(String(50))
    color = Column(String(20), default="#3b82f6")
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    discussions = relationship("ForumDiscussion", back_populates="category")


class ForumDiscussion(Base):
    __tablename__ = "forum_discussions"

    discussion_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("forum_categories.category_id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    is_pinned = Column(Boolean, default=False)
    is_locked = Column(Boolean, default=False)
    views_count = Column(Integer, nullable=False, default=0)
    replies_count = Column(Integer, nullable=False, default=0)
    likes_count = Column(Integer, nullable=False, default=0)
    last_activity_at = Column(DateTime, server_default=func.now())
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())
    deleted_at = Column(DateTime)

    author = relationship("User", back_populates="forum_discussions")
    category = relationship("ForumCategory", back_populates="discussions")
    replies = relationship("ForumReply", back_populates="discussion", cascade="all, delete-orphan")
    views = relationship("ForumView", back_populates="discussion", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_forum_discussion_category", "category_id", "last_activity_at"),
    )


class ForumReply(Base):
    __tablename__ = "forum_replies"

    reply_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("forum_discussions.discussion_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    parent_id = Column(Integer, ForeignKey("forum_replies.reply_id", ondelete="CASCADE"))
    content = Column(Text, nullable=False)
    likes_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())
    deleted_at = Column(DateTime)

    discussion = relationship("ForumDiscussion", back_populates="replies")
    author = relationship("User", back_populates="forum_replies")
    parent = relationship("ForumReply", remote_side=[reply_id])

    __table_args__ = (
        Index("idx_forum_reply_discussion", "discussion_id", "created_at"),
    )


class ForumLike(Base):
    __tablename__ = "forum_likes"

    like_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    target_type = Column(String(20), nullable=False)  # discussion/reply
    target_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_forum_like_user_target"),
        Index("idx_forum_like_target", "target_type", "target_id"),
    )


class ForumView(Base):
    __tablename__ = "forum_views"

    view_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("forum_discussions.discussion_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    viewed_at = Column(DateTime, server_default=func.now(), nullable=False)

    discussion = relationship("ForumDiscussion", back_populates="views")

    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_forum_view_discussion_user"),
    )


class ForumReport(Base):
    __tablename__ = "forum_reports"

    report_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)  # 신고자
    target_type = Column(String(20), nullable=False)  # discussion/reply
    target_id = Column(Integer, nullable=False)
    reason = Column(String(30), nullable=False)  # spam/inappropriate/offensive/harassment/other
    description = Column(Text)
    status = Column(String(20), nullable=False, default="pending")  # pending/reviewed/resolved/rejected
    reviewed_by = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))
    reviewed_at = Column(DateTime)
    admin_notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    reporter = relationship("User", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])

    __table_args__ = (
        Index("idx_forum_report_target", "target_type", "target_id"),
        Index("idx_forum_report_status", "status"),
    )
