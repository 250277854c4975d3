"""관리자용 갤러리 승인/반려 API 라우터입니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.user import User
from app.schemas.gallery import GalleryModeration, GalleryOut, GalleryStatistics
from app.services import gallery_service
from app.utils.helpers import clamp_limit
from app.utils.workflow import GalleryStatus, GalleryType

router = APIRouter(prefix="/api/admin/gallery", tags=["admin-gallery"])


@router.get("", response_model=List[GalleryOut])
def list_items(
    status: Optional[GalleryStatus] = None,
    type: Optional[GalleryType] = None,
    batch: Optional[str] = None,
    search: Optional[str] = None,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return gallery_service.admin_list(
        db,
        current_user,
        status=status,
        type=type,
        batch=batch,
        search=search,
        include_deleted=include_deleted,
        skip=max(skip, 0),
        limit=clamp_limit(limit),
    )


@router.get("/statistics", response_model=GalleryStatistics)
def statistics(db: Session = Depends(get_db), _current_user: User = Depends(require_admin)):
    return gallery_service.statistics(db)


@router.patch("/{gallery_id}", response_model=GalleryOut)
def moderate(
    gallery_id: int,
    data: GalleryModeration,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return gallery_service.moderate(db, gallery_id, data.action, data.reason, current_user)


@router.delete("/{gallery_id}", status_code=204)
def delete_item(gallery_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    gallery_service.admin_delete(db, gallery_id, current_user)
    return Response(status_code=204)


@router.post("/{gallery_id}/restore", response_model=GalleryOut)
def restore_item(gallery_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return gallery_service.restore(db, gallery_id, current_user)
