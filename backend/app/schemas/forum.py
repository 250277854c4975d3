"""Forum 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.utils.workflow import ReportReason, ReportStatus, ReportTarget
from app.schemas.user import UserBrief


class ForumCategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: str = Field("#3b82f6", max_length=20)
    display_order: int = 0
    is_active: bool = True


class ForumCategoryCreate(ForumCategoryBase):
    pass


class ForumCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=50)
    color: Optional[str] = Field(None, max_length=20)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class ForumCategoryOut(ForumCategoryBase):
    category_id: int
    slug: str
    discussions_count: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DiscussionCreate(BaseModel):
    category_id: int
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class DiscussionUpdate(BaseModel):
    category_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)


class DiscussionOut(BaseModel):
    discussion_id: int
    user_id: int
    category_id: int
    title: str
    slug: str
    content: str
    is_pinned: bool
    is_locked: bool
    views_count: int
    replies_count: int
    likes_count: int
    last_activity_at: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]
    author: Optional[UserBrief] = None
    category_name: Optional[str] = None
    user_liked: bool = False

    model_config = {"from_attributes": True}


class ReplyCreate(BaseModel):
    content: str = Field(..., min_length=1)
    parent_id: Optional[int] = None


class ReplyUpdate(BaseModel):
    content: str = Field(..., min_length=1)


class ReplyOut(BaseModel):
    reply_id: int
    discussion_id: int
    user_id: int
    parent_id: Optional[int]
    content: str
    likes_count: int
    created_at: datetime
    updated_at: Optional[datetime]
    author: Optional[UserBrief] = None
    user_liked: bool = False

    model_config = {"from_attributes": True}


class DiscussionDetailOut(BaseModel):
    discussion: DiscussionOut
    replies: list[ReplyOut]
    can_edit: bool
    can_delete: bool
    is_admin: bool


class DiscussionListOut(BaseModel):
    pinned: list[DiscussionOut]
    discussions: list[DiscussionOut]


class LikeToggleOut(BaseModel):
    liked: bool
    likes_count: int


class ReportCreate(BaseModel):
    target_type: ReportTarget
    target_id: int
    reason: ReportReason
    description: Optional[str] = Field(None, max_length=500)


class ReportReview(BaseModel):
    status: ReportStatus
    admin_notes: Optional[str] = Field(None, max_length=1000)
    delete_content: bool = False


class ReportOut(BaseModel):
    report_id: int
    user_id: int
    target_type: ReportTarget
    target_id: int
    reason: ReportReason
    description: Optional[str]
    status: ReportStatus
    reviewed_by: Optional[int]
    reviewed_at: Optional[datetime]
    admin_notes: Optional[str]
    created_at: datetime
    reporter: Optional[UserBrief] = None
    reviewer_name: Optional[str] = None
    target_excerpt: Optional[str] = None
    target_exists: bool = True

    model_config = {"from_attributes": True}
