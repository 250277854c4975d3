"""관리자용 회원 관리 API 라우터입니다."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.user import User
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services import user_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])


@router.get("", response_model=List[UserOut])
def list_users(
    search: str | None = None,
    role: str | None = None,
    angkatan: str | None = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.list_users(
        db,
        search=search,
        role=role,
        angkatan=angkatan,
        include_inactive=include_inactive,
        skip=max(skip, 0),
        limit=clamp_limit(limit),
    )


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db), _current_user: User = Depends(require_admin)):
    return user_service.get_user(db, user_id)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.create_user(db, data)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.update_user(db, user_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user_service.delete_user(db, user_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/restore", response_model=UserOut)
def restore_user(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return user_service.restore_user(db, user_id)
