"""Gallery 기능 API 라우터입니다. 동문 본인의 사진 등록/수정/삭제를 제공합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.gallery import GalleryOut
from app.services import gallery_service
from app.utils.helpers import clamp_limit
from app.utils.workflow import GalleryStatus, GalleryType

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.get("/mine", response_model=List[GalleryOut])
def list_mine(
    type: Optional[GalleryType] = None,
    status: Optional[GalleryStatus] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return gallery_service.list_mine(
        db, current_user, type=type, status=status, search=search, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.post("", response_model=GalleryOut, status_code=201)
async def create_item(
    image: UploadFile = File(...),
    title: str = Form(...),
    type: GalleryType = Form(GalleryType.PERSONAL),
    description: Optional[str] = Form(None),
    batch: Optional[str] = Form(None, max_length=4),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await gallery_service.create_item(
        db, current_user, image, title=title, type=type, description=description, batch=batch
    )


@router.get("/{gallery_id}", response_model=GalleryOut)
def get_item(gallery_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return gallery_service.get_item(db, gallery_id, current_user)


@router.put("/{gallery_id}", response_model=GalleryOut)
async def update_item(
    gallery_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    type: Optional[GalleryType] = Form(None),
    batch: Optional[str] = Form(None, max_length=4),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await gallery_service.update_item(
        db,
        gallery_id,
        current_user,
        title=title,
        description=description,
        type=type,
        batch=batch,
        file=image,
    )


@router.delete("/{gallery_id}", status_code=204)
def delete_item(gallery_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    gallery_service.delete_item(db, gallery_id, current_user)
    return Response(status_code=204)
