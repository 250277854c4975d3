"""Article 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class ArticleCategory(Base):
    __tablename__ = "article_categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text)
    display_order = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    articles = relationship("Article", back_populates="category")


class Article(Base):
    __tablename__ = "articles"

    article_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("article_categories.category_id", ondelete="SET NULL"))
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    excerpt = Column(String(300))
    content = Column(Text, nullable=False)
    featured_image = Column(String(500))
    is_published = Column(Boolean, default=False)
    published_at = Column(DateTime)
    views_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    author = relationship("User", back_populates="articles")
    category = relationship("ArticleCategory", back_populates="articles")

    __table_args__ = (
        Index("idx_article_published", "is_published", "published_at"),
    )
