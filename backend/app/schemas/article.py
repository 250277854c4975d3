"""Article 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.schemas.user import UserBrief


class ArticleCategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    display_order: int = 0
    is_active: bool = True


class ArticleCategoryCreate(ArticleCategoryBase):
    pass


class ArticleCategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class ArticleCategoryOut(ArticleCategoryBase):
    category_id: int
    slug: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ArticleCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = Field(None, max_length=300)
    category_id: Optional[int] = None
    is_published: bool = False


class ArticleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = Field(None, max_length=300)
    category_id: Optional[int] = None
    is_published: Optional[bool] = None


class ArticleOut(BaseModel):
    article_id: int
    user_id: int
    category_id: Optional[int]
    title: str
    slug: str
    excerpt: Optional[str]
    content: str
    featured_image_url: Optional[str] = None
    is_published: bool
    published_at: Optional[datetime]
    views_count: int
    reading_time: int = 1
    created_at: datetime
    updated_at: Optional[datetime]
    author: Optional[UserBrief] = None
    category_name: Optional[str] = None

    model_config = {"from_attributes": True}
