"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    notification_service,
    auth_service,
    user_service,
    event_service,
    reminder_service,
    gallery_service,
    forum_service,
    report_service,
    article_service,
    dashboard_service,
)
