"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime


class UserBase(BaseModel):
    email: str = Field(..., max_length=150)
    name: str = Field(..., min_length=1, max_length=100)
    role: str = "alumni"
    angkatan: Optional[str] = Field(None, max_length=4)
    profesi: Optional[str] = Field(None, max_length=150)
    bio: Optional[str] = Field(None, max_length=1000)


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    email: Optional[str] = Field(None, max_length=150)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[str] = None
    angkatan: Optional[str] = Field(None, max_length=4)
    profesi: Optional[str] = Field(None, max_length=150)
    bio: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None


class ProfileUpdate(BaseModel):
    angkatan: Optional[str] = Field(None, max_length=4)
    profesi: Optional[str] = Field(None, max_length=150)
    bio: Optional[str] = Field(None, max_length=1000)


class UserOut(UserBase):
    user_id: int
    profile_picture: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UserBrief(BaseModel):
    user_id: int
    name: str
    angkatan: Optional[str] = None
    profesi: Optional[str] = None
    profile_picture: Optional[str] = None

    model_config = {"from_attributes": True}


class DirectoryEntryOut(UserBrief):
    email: str
    bio: Optional[str] = None
    created_at: datetime


class LoginRequest(BaseModel):
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class NavItemOut(BaseModel):
    key: str
    title: str
    href: str
    icon: str

    model_config = {"from_attributes": True}


class NavigationOut(BaseModel):
    role: Literal["admin", "alumni"]
    role_label: str
    items: list[NavItemOut]
