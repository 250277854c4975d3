"""로그인 없이 볼 수 있는 공개 갤러리 API 라우터입니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.gallery import GalleryBatchCount, GalleryOut
from app.services import gallery_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/public/gallery", tags=["public-gallery"])


@router.get("", response_model=List[GalleryOut])
def list_public(
    batch: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
):
    return gallery_service.list_public(db, batch=batch, search=search, skip=max(skip, 0), limit=clamp_limit(limit))


@router.get("/batches", response_model=List[GalleryBatchCount])
def list_batches(db: Session = Depends(get_db)):
    return gallery_service.list_public_batches(db)


@router.get("/{gallery_id}", response_model=GalleryOut)
def view_item(gallery_id: int, db: Session = Depends(get_db)):
    return gallery_service.view_public(db, gallery_id)
