"""Forum 신고 API 라우터입니다. 동문 신고 접수와 관리자 검토 엔드포인트를 함께 둡니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_admin
from app.models.user import User
from app.schemas.forum import ReportCreate, ReportOut, ReportReview
from app.services import report_service
from app.utils.helpers import clamp_limit
from app.utils.workflow import ReportStatus

router = APIRouter(prefix="/api/forum/reports", tags=["forum-reports"])
admin_router = APIRouter(prefix="/api/admin/forum/reports", tags=["admin-forum-reports"])


@router.post("", response_model=ReportOut, status_code=201)
def create_report(data: ReportCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return report_service.create_report(db, data, current_user)


@admin_router.get("", response_model=List[ReportOut])
def list_reports(
    status: Optional[ReportStatus] = None,
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return report_service.list_reports(db, current_user, status=status, skip=max(skip, 0), limit=clamp_limit(limit))


@admin_router.get("/{report_id}", response_model=ReportOut)
def get_report(report_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return report_service.get_report(db, report_id, current_user)


@admin_router.patch("/{report_id}", response_model=ReportOut)
def review_report(
    report_id: int,
    data: ReportReview,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return report_service.review_report(db, report_id, data, current_user)


@admin_router.delete("/{report_id}/content", response_model=ReportOut)
def delete_content(report_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return report_service.delete_reported_content(db, report_id, current_user)
