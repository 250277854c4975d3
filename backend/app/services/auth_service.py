"""Auth Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from app.models.user import User
from app.config import settings
from app.utils.navigation import build_navigation
from app.utils.permissions import ALUMNI, ROLE_LABELS, normalize_role

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_sso_login(db: Session, email: str) -> User:
    normalized = (email or "").strip().lower()
    user = db.query(User).filter(User.email == normalized, User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Pengguna aktif dengan email '{email}' tidak ditemukan.",
        )
    return user


def navigation_for(user: User) -> dict:
    role = normalize_role(user.role)
    if role not in ROLE_LABELS:
        role = ALUMNI
    return {
        "role": role,
        "role_label": ROLE_LABELS[role],
        "items": build_navigation(role),
    }
