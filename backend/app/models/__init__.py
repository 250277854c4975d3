"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.notification import Notification
from app.models.event import Event, EventRegistration
from app.models.gallery import Gallery
from app.models.forum import ForumCategory, ForumDiscussion, ForumReply, ForumLike, ForumView, ForumReport
from app.models.article import ArticleCategory, Article

__all__ = [
    "User",
    "Notification",
    "Event", "EventRegistration",
    "Gallery",
    "ForumCategory", "ForumDiscussion", "ForumReply", "ForumLike", "ForumView", "ForumReport",
    "ArticleCategory", "Article",
]
