"""Permissions 관련 공용 유틸리티 헬퍼입니다."""

from fastapi import HTTPException

from app.models.user import User


ADMIN = "admin"
ALUMNI = "alumni"

ALL_ROLES = (ADMIN, ALUMNI)

ROLE_LABELS = {
    ADMIN: "Administrator",
    ALUMNI: "Alumni",
}


def normalize_role(role: str | None) -> str:
    # 관리 화면에서 대문자(ADMIN/ALUMNI)로 넘어오는 경우도 허용한다.
    return str(role or "").strip().lower()


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_owner(user: User, owner_id: int | None) -> bool:
    return owner_id is not None and int(owner_id) == int(user.user_id)


def can_manage(user: User, owner_id: int | None) -> bool:
    return is_admin(user) or is_owner(user, owner_id)


def ensure_admin(user: User, detail: str = "Hanya admin yang dapat mengakses fitur ini."):
    if not is_admin(user):
        raise HTTPException(status_code=403, detail=detail)


def ensure_can_manage(user: User, owner_id: int | None, detail: str = "Anda tidak memiliki akses untuk mengubah konten ini."):
    if not can_manage(user, owner_id):
        raise HTTPException(status_code=403, detail=detail)
