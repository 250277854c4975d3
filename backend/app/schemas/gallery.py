"""Gallery 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

from app.utils.workflow import GalleryStatus, GalleryType
from app.schemas.user import UserBrief


class GalleryOut(BaseModel):
    gallery_id: int
    user_id: int
    title: str
    description: Optional[str]
    image_path: str
    image_url: Optional[str] = None
    batch: Optional[str]
    type: GalleryType
    status: GalleryStatus
    rejection_reason: Optional[str]
    approved_by: Optional[int]
    approved_at: Optional[datetime]
    views_count: int
    created_at: datetime
    updated_at: Optional[datetime]
    deleted_at: Optional[datetime] = None
    owner: Optional[UserBrief] = None
    approver_name: Optional[str] = None

    model_config = {"from_attributes": True}


class GalleryModeration(BaseModel):
    action: Literal["approve", "reject"]
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator("reason")
    @classmethod
    def _strip_reason(cls, value):
        if value is None:
            return None
        return value.strip() or None


class GalleryBatchCount(BaseModel):
    batch: str
    total: int


class GalleryStatistics(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
    public: int
    personal: int
    by_batch: list[GalleryBatchCount]
