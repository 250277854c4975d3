"""Article Service 도메인 서비스 레이어입니다. 동문 기고 글과 카테고리 관리를 담당합니다."""

import logging
import math
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.article import Article, ArticleCategory
from app.models.user import User
from app.schemas.article import (
    ArticleCategoryCreate, ArticleCategoryUpdate, ArticleCreate, ArticleUpdate,
)
from app.utils.helpers import (
    delete_stored_file, excerpt_from, public_url, save_image, strip_tags, unique_slug,
)
from app.utils.permissions import can_manage, ensure_admin, ensure_can_manage

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200


def reading_time(content: str | None) -> int:
    words = len(strip_tags(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def _serialize(article: Article) -> Article:
    setattr(article, "featured_image_url", public_url(article.featured_image))
    setattr(article, "reading_time", reading_time(article.content))
    setattr(article, "category_name", article.category.name if article.category is not None else None)
    return article


# ---- categories --------------------------------------------------------


def _get_category(db: Session, category_id: int) -> ArticleCategory:
    category = db.query(ArticleCategory).filter(ArticleCategory.category_id == int(category_id)).first()
    if not category:
        raise HTTPException(status_code=404, detail="Kategori artikel tidak ditemukan.")
    return category


def _category_slug_exists(db: Session, exclude_id: int | None = None):
    def exists(slug: str) -> bool:
        q = db.query(ArticleCategory.category_id).filter(ArticleCategory.slug == slug)
        if exclude_id is not None:
            q = q.filter(ArticleCategory.category_id != exclude_id)
        return q.first() is not None
    return exists


def list_categories(db: Session, include_inactive: bool = False) -> List[ArticleCategory]:
    q = db.query(ArticleCategory)
    if not include_inactive:
        q = q.filter(ArticleCategory.is_active == True)  # noqa: E712
    return q.order_by(ArticleCategory.display_order.asc(), ArticleCategory.name.asc()).all()


def create_category(db: Session, data: ArticleCategoryCreate, current_user: User) -> ArticleCategory:
    ensure_admin(current_user)
    category = ArticleCategory(**data.model_dump(), slug=unique_slug(data.name, _category_slug_exists(db)))
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: ArticleCategoryUpdate, current_user: User) -> ArticleCategory:
    ensure_admin(current_user)
    category = _get_category(db, category_id)
    payload = data.model_dump(exclude_unset=True)
    if payload.get("name") and payload["name"] != category.name:
        category.slug = unique_slug(payload["name"], _category_slug_exists(db, category.category_id))
    for k, v in payload.items():
        setattr(category, k, v)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int, current_user: User):
    ensure_admin(current_user)
    category = _get_category(db, category_id)
    # 연결된 글은 category_id 가 NULL 로 남는다.
    db.query(Article).filter(Article.category_id == category.category_id).update(
        {"category_id": None}, synchronize_session=False
    )
    db.delete(category)
    db.commit()


# ---- articles ----------------------------------------------------------


def _get_article(db: Session, article_id: int) -> Article:
    article = db.query(Article).filter(Article.article_id == int(article_id)).first()
    if not article:
        raise HTTPException(status_code=404, detail="Artikel tidak ditemukan.")
    return article


def _article_slug_exists(db: Session, exclude_id: int | None = None):
    def exists(slug: str) -> bool:
        q = db.query(Article.article_id).filter(Article.slug == slug)
        if exclude_id is not None:
            q = q.filter(Article.article_id != exclude_id)
        return q.first() is not None
    return exists


def _published_query(db: Session):
    return db.query(Article).filter(Article.is_published == True)  # noqa: E712


def list_published(
    db: Session,
    search: Optional[str] = None,
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[Article]:
    q = _published_query(db)
    if category:
        q = q.join(ArticleCategory, ArticleCategory.category_id == Article.category_id).filter(
            ArticleCategory.slug == category
        )
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(Article.title.ilike(like), Article.excerpt.ilike(like), Article.content.ilike(like)))
    rows = q.order_by(Article.published_at.desc(), Article.article_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(row) for row in rows]


def list_popular(db: Session, limit: int = 5) -> List[Article]:
    rows = _published_query(db).order_by(Article.views_count.desc(), Article.article_id.desc()).limit(limit).all()
    return [_serialize(row) for row in rows]


def list_recent(db: Session, limit: int = 5) -> List[Article]:
    rows = _published_query(db).order_by(Article.published_at.desc(), Article.article_id.desc()).limit(limit).all()
    return [_serialize(row) for row in rows]


def list_mine(
    db: Session,
    current_user: User,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[Article]:
    q = db.query(Article).filter(Article.user_id == current_user.user_id)
    if status == "published":
        q = q.filter(Article.is_published == True)  # noqa: E712
    elif status == "draft":
        q = q.filter(Article.is_published == False)  # noqa: E712
    rows = q.order_by(Article.created_at.desc(), Article.article_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(row) for row in rows]


def get_by_slug(db: Session, slug: str, current_user: Optional[User] = None) -> Article:
    article = db.query(Article).filter(Article.slug == slug).first()
    if not article:
        raise HTTPException(status_code=404, detail="Artikel tidak ditemukan.")
    # 비로그인 사용자는 게시된 글만 볼 수 있다.
    if not article.is_published and (current_user is None or not can_manage(current_user, article.user_id)):
        raise HTTPException(status_code=404, detail="Artikel tidak ditemukan.")
    if article.is_published:
        db.query(Article).filter(Article.article_id == article.article_id).update(
            {"views_count": Article.views_count + 1}, synchronize_session=False
        )
        db.commit()
        db.refresh(article)
    return _serialize(article)


def get_article(db: Session, article_id: int, current_user: User) -> Article:
    article = _get_article(db, article_id)
    if not article.is_published and not can_manage(current_user, article.user_id):
        raise HTTPException(status_code=404, detail="Artikel tidak ditemukan.")
    return _serialize(article)


def _apply_publish(article: Article, is_published: bool):
    article.is_published = bool(is_published)
    if article.is_published and article.published_at is None:
        article.published_at = datetime.now()


def create_article(db: Session, data: ArticleCreate, current_user: User) -> Article:
    if data.category_id is not None:
        _get_category(db, data.category_id)
    article = Article(
        user_id=current_user.user_id,
        category_id=data.category_id,
        title=data.title,
        slug=unique_slug(data.title, _article_slug_exists(db)),
        excerpt=(data.excerpt or "").strip() or excerpt_from(data.content),
        content=data.content,
        views_count=0,
    )
    _apply_publish(article, data.is_published)
    db.add(article)
    db.commit()
    db.refresh(article)
    logger.info("[article] created article_id=%s published=%s", article.article_id, article.is_published)
    return _serialize(article)


def update_article(db: Session, article_id: int, data: ArticleUpdate, current_user: User) -> Article:
    article = _get_article(db, article_id)
    ensure_can_manage(current_user, article.user_id)
    payload = data.model_dump(exclude_unset=True)
    if payload.get("category_id") is not None:
        _get_category(db, payload["category_id"])
    if payload.get("title") and payload["title"] != article.title:
        article.slug = unique_slug(payload["title"], _article_slug_exists(db, article.article_id))
    for key in ("title", "content", "category_id"):
        if key in payload and (payload[key] is not None or key == "category_id"):
            setattr(article, key, payload[key])
    if "excerpt" in payload or "content" in payload:
        article.excerpt = (payload.get("excerpt") or "").strip() or excerpt_from(article.content)
    if payload.get("is_published") is not None:
        _apply_publish(article, payload["is_published"])
    db.commit()
    db.refresh(article)
    return _serialize(article)


def toggle_publish(db: Session, article_id: int, current_user: User) -> Article:
    article = _get_article(db, article_id)
    ensure_can_manage(current_user, article.user_id)
    _apply_publish(article, not bool(article.is_published))
    db.commit()
    db.refresh(article)
    logger.info("[article] article_id=%s published=%s", article.article_id, article.is_published)
    return _serialize(article)


async def upload_featured_image(db: Session, article_id: int, file: UploadFile, current_user: User) -> Article:
    article = _get_article(db, article_id)
    ensure_can_manage(current_user, article.user_id)
    new_path = await save_image(file, subfolder="articles")
    old_path = article.featured_image
    article.featured_image = new_path
    db.commit()
    db.refresh(article)
    delete_stored_file(old_path)
    return _serialize(article)


def delete_article(db: Session, article_id: int, current_user: User):
    article = _get_article(db, article_id)
    ensure_can_manage(current_user, article.user_id)
    image_path = article.featured_image
    db.delete(article)
    db.commit()
    delete_stored_file(image_path)
    logger.info("[article] deleted article_id=%s by=%s", article_id, current_user.user_id)
