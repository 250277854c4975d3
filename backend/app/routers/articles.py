"""Articles 기능 API 라우터입니다. 공개 글 조회와 작성자 본인의 글 관리를 제공합니다."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, get_optional_user
from app.models.user import User
from app.schemas.article import ArticleCreate, ArticleOut, ArticleUpdate
from app.services import article_service
from app.utils.helpers import clamp_limit

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("", response_model=List[ArticleOut])
def list_articles(
    search: Optional[str] = None,
    category: Optional[str] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
):
    return article_service.list_published(
        db, search=search, category=category, skip=max(skip, 0), limit=clamp_limit(limit)
    )


@router.get("/popular", response_model=List[ArticleOut])
def popular(limit: int = 5, db: Session = Depends(get_db)):
    return article_service.list_popular(db, limit=clamp_limit(limit))


@router.get("/recent", response_model=List[ArticleOut])
def recent(limit: int = 5, db: Session = Depends(get_db)):
    return article_service.list_recent(db, limit=clamp_limit(limit))


@router.get("/mine", response_model=List[ArticleOut])
def my_articles(
    status: Optional[Literal["published", "draft"]] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return article_service.list_mine(db, current_user, status=status, skip=max(skip, 0), limit=clamp_limit(limit))


@router.get("/id/{article_id}", response_model=ArticleOut)
def get_article(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return article_service.get_article(db, article_id, current_user)


@router.get("/{slug}", response_model=ArticleOut)
def get_by_slug(slug: str, db: Session = Depends(get_db), current_user: User | None = Depends(get_optional_user)):
    return article_service.get_by_slug(db, slug, current_user)


@router.post("", response_model=ArticleOut, status_code=201)
def create_article(data: ArticleCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return article_service.create_article(db, data, current_user)


@router.put("/{article_id}", response_model=ArticleOut)
def update_article(
    article_id: int,
    data: ArticleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return article_service.update_article(db, article_id, data, current_user)


@router.post("/{article_id}/toggle-publish", response_model=ArticleOut)
def toggle_publish(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return article_service.toggle_publish(db, article_id, current_user)


@router.post("/{article_id}/image", response_model=ArticleOut)
async def upload_image(
    article_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not file.filename:
        raise HTTPException(status_code=400, detail="File gambar wajib diunggah.")
    return await article_service.upload_featured_image(db, article_id, file, current_user)


@router.delete("/{article_id}", status_code=204)
def delete_article(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    article_service.delete_article(db, article_id, current_user)
    return Response(status_code=204)
