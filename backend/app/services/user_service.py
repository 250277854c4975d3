"""User Service 도메인 서비스 레이어입니다. 회원 관리와 동문 디렉터리 조회를 담당합니다."""

import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.user import ProfileUpdate, UserCreate, UserUpdate
from app.services import notification_service
from app.utils.permissions import ADMIN, ALL_ROLES, ALUMNI, normalize_role

logger = logging.getLogger(__name__)


def _normalize_role_or_raise(role: str) -> str:
    normalized = normalize_role(role)
    if normalized not in ALL_ROLES:
        raise HTTPException(status_code=400, detail="Role tidak valid.")
    return normalized


def _normalize_email(email: str) -> str:
    text = (email or "").strip().lower()
    if "@" not in text:
        raise HTTPException(status_code=400, detail="Email tidak valid.")
    return text


def _ensure_email_available(db: Session, email: str, exclude_user_id: int | None = None):
    q = db.query(User.user_id).filter(User.email == email)
    if exclude_user_id is not None:
        q = q.filter(User.user_id != exclude_user_id)
    if q.first():
        raise HTTPException(status_code=409, detail="Email sudah digunakan.")


def _ensure_not_last_admin_change(db: Session, user: User, next_role: str, next_active: bool):
    is_admin_leaving = user.role == ADMIN and (next_role != ADMIN or next_active is False)
    if is_admin_leaving:
        admin_count = db.query(User).filter(User.role == ADMIN, User.is_active == True).count()  # noqa: E712
        if admin_count <= 1:
            raise HTTPException(status_code=400, detail="Admin terakhir tidak dapat diubah atau dinonaktifkan.")


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Pengguna tidak ditemukan.")
    return user


def list_users(
    db: Session,
    search: str | None = None,
    role: str | None = None,
    angkatan: str | None = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 20,
) -> List[User]:
    q = db.query(User)
    if not include_inactive:
        q = q.filter(User.is_active == True)  # noqa: E712
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(User.name.ilike(like), User.email.ilike(like)))
    if role and role != "all":
        q = q.filter(User.role == normalize_role(role))
    if angkatan and angkatan != "all":
        q = q.filter(User.angkatan == angkatan)
    return q.order_by(User.created_at.desc(), User.user_id.desc()).offset(skip).limit(limit).all()


def create_user(db: Session, data: UserCreate) -> User:
    payload = data.model_dump()
    payload["email"] = _normalize_email(payload["email"])
    payload["role"] = _normalize_role_or_raise(payload["role"])
    _ensure_email_available(db, payload["email"])
    user = User(**payload)
    db.add(user)
    db.commit()
    db.refresh(user)
    notification_service.create_notification(
        db,
        user_id=user.user_id,
        noti_type="welcome",
        title="Selamat datang di portal alumni",
        message=f"Halo {user.name}, lengkapi profil Anda agar mudah ditemukan di direktori alumni.",
        link_url="/settings/profile",
    )
    logger.info("[user] created user_id=%s role=%s", user.user_id, user.role)
    return user


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    user = get_user(db, user_id)
    payload = data.model_dump(exclude_none=True)
    if "email" in payload:
        payload["email"] = _normalize_email(payload["email"])
        _ensure_email_available(db, payload["email"], exclude_user_id=user.user_id)
    if "role" in payload:
        payload["role"] = _normalize_role_or_raise(payload["role"])
    _ensure_not_last_admin_change(
        db,
        user,
        next_role=payload.get("role", user.role),
        next_active=payload.get("is_active", bool(user.is_active)),
    )
    for k, v in payload.items():
        setattr(user, k, v)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int, current_user: User):
    user = get_user(db, user_id)
    if user.user_id == current_user.user_id:
        raise HTTPException(status_code=400, detail="Tidak dapat menghapus akun sendiri.")
    _ensure_not_last_admin_change(db, user, next_role=user.role, next_active=False)
    user.is_active = False
    db.commit()
    logger.info("[user] deactivated user_id=%s by=%s", user.user_id, current_user.user_id)


def restore_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if user.is_active:
        raise HTTPException(status_code=409, detail="Pengguna masih aktif.")
    user.is_active = True
    db.commit()
    db.refresh(user)
    return user


def get_directory(
    db: Session,
    search: str | None = None,
    angkatan: str | None = None,
    profesi: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> List[User]:
    q = db.query(User).filter(User.role == ALUMNI, User.is_active == True)  # noqa: E712
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(User.name.ilike(like), User.profesi.ilike(like)))
    if angkatan:
        q = q.filter(User.angkatan == angkatan)
    if profesi and profesi.strip():
        q = q.filter(User.profesi.ilike(f"%{profesi.strip()}%"))
    return q.order_by(User.name.asc(), User.user_id.asc()).offset(skip).limit(limit).all()


def list_angkatan(db: Session) -> list[str]:
    rows = (
        db.query(User.angkatan)
        .filter(User.role == ALUMNI, User.angkatan.isnot(None))
        .distinct()
        .order_by(User.angkatan.desc())
        .all()
    )
    return [row[0] for row in rows]


def update_profile(db: Session, current_user: User, data: ProfileUpdate) -> User:
    for k, v in data.model_dump(exclude_none=True).items():
        setattr(current_user, k, v)
    db.commit()
    db.refresh(current_user)
    return current_user
