"""Article 카테고리 API 라우터입니다. 조회는 공개, 변경은 관리자 전용입니다."""

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.user import User
from app.schemas.article import ArticleCategoryCreate, ArticleCategoryOut, ArticleCategoryUpdate
from app.services import article_service

router = APIRouter(prefix="/api/article-categories", tags=["article-categories"])


@router.get("", response_model=List[ArticleCategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return article_service.list_categories(db)


@router.get("/all", response_model=List[ArticleCategoryOut])
def list_all_categories(db: Session = Depends(get_db), _current_user: User = Depends(require_admin)):
    return article_service.list_categories(db, include_inactive=True)


@router.post("", response_model=ArticleCategoryOut, status_code=201)
def create_category(
    data: ArticleCategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return article_service.create_category(db, data, current_user)


@router.put("/{category_id}", response_model=ArticleCategoryOut)
def update_category(
    category_id: int,
    data: ArticleCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return article_service.update_category(db, category_id, data, current_user)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    article_service.delete_category(db, category_id, current_user)
    return Response(status_code=204)
