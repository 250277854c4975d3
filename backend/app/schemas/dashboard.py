"""Dashboard 응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional

from app.schemas.user import UserBrief
from app.schemas.event import EventOut, MyRegistrationOut
from app.schemas.gallery import GalleryStatistics


class YearCount(BaseModel):
    year: str
    total: int


class ProfessionCount(BaseModel):
    profesi: str
    total: int


class AdminDashboardOut(BaseModel):
    total_users: int
    total_alumni: int
    total_admins: int
    recent_registrations: int
    alumni_by_year: list[YearCount]
    alumni_by_profession: list[ProfessionCount]
    recent_alumni: list[UserBrief]
    gallery: GalleryStatistics
    pending_reports: int
    upcoming_events: list[EventOut]


class AlumniProfileOut(BaseModel):
    name: str
    email: str
    angkatan: Optional[str]
    profesi: Optional[str]
    bio: Optional[str]


class AlumniStatistics(BaseModel):
    total_alumni: int
    alumni_in_same_year: int
    recent_registrations: int


class AlumniDashboardOut(BaseModel):
    user_profile: AlumniProfileOut
    statistics: AlumniStatistics
    recent_alumni: list[UserBrief]
    alumni_by_year: list[YearCount]
    my_registrations: list[MyRegistrationOut]
