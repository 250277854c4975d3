"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 업로드 파일 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import (
    auth, users, alumni, events, admin_events, gallery, public_gallery, admin_gallery,
    forum, forum_reports, articles, article_categories, notifications, dashboard,
)
from app.utils.schema_sync import sync_missing_schema_objects

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="IKAPSI Portal Alumni",
    description="Portal alumni: direktori, event, galeri, forum, dan artikel",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(alumni.router)
app.include_router(events.router)
app.include_router(admin_events.router)
app.include_router(gallery.router)
app.include_router(public_gallery.router)
app.include_router(admin_gallery.router)
app.include_router(forum_reports.router)
app.include_router(forum_reports.admin_router)
app.include_router(forum.router)
app.include_router(articles.router)
app.include_router(article_categories.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 기능 배포 시 누락된 테이블/컬럼/인덱스를 자동 생성합니다.
    Base.metadata.create_all(bind=engine)
    added = sync_missing_schema_objects(engine, Base.metadata)
    if added:
        logger.info("[schema] synced %s object(s)", len(added))


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "IKAPSI Portal Alumni"}


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
