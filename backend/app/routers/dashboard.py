"""대시보드 집계 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_admin
from app.models.user import User
from app.schemas.dashboard import AdminDashboardOut, AlumniDashboardOut
from app.services import dashboard_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/admin", response_model=AdminDashboardOut)
def admin_dashboard(db: Session = Depends(get_db), _current_user: User = Depends(require_admin)):
    return dashboard_service.admin_dashboard(db)


@router.get("/alumni", response_model=AlumniDashboardOut)
def alumni_dashboard(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return dashboard_service.alumni_dashboard(db, current_user)
