"""동문 디렉터리와 본인 프로필 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.user import DirectoryEntryOut, ProfileUpdate, UserOut
from app.services import user_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/alumni", tags=["alumni"])


@router.get("/directory", response_model=List[DirectoryEntryOut])
def directory(
    search: str | None = None,
    angkatan: str | None = None,
    profesi: str | None = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    _current_user: User = Depends(get_current_user),
):
    return user_service.get_directory(
        db, search=search, angkatan=angkatan, profesi=profesi, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.get("/angkatan", response_model=List[str])
def angkatan_options(db: Session = Depends(get_db), _current_user: User = Depends(get_current_user)):
    return user_service.list_angkatan(db)


@router.patch("/profile", response_model=UserOut)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user, data)
