"""대시보드 집계 서비스입니다. 관리자 통계와 동문 개인 대시보드를 구성합니다."""

from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import settings
from app.models.event import Event
from app.models.user import User
from app.services import event_service, gallery_service, report_service
from app.utils.permissions import ADMIN, ALUMNI


def _active_alumni(db: Session):
    return db.query(User).filter(User.role == ALUMNI, User.is_active == True)  # noqa: E712


def _recent_cutoff() -> datetime:
    return datetime.now() - timedelta(days=settings.RECENT_DAYS)


def alumni_by_year(db: Session, limit: int = 5) -> list[dict]:
    rows = (
        _active_alumni(db)
        .filter(User.angkatan.isnot(None))
        .with_entities(User.angkatan, func.count(User.user_id))
        .group_by(User.angkatan)
        .order_by(func.count(User.user_id).desc(), User.angkatan.desc())
        .limit(limit)
        .all()
    )
    return [{"year": year, "total": int(total)} for year, total in rows]


def alumni_by_profession(db: Session, limit: int = 10) -> list[dict]:
    rows = (
        _active_alumni(db)
        .filter(User.profesi.isnot(None), User.profesi != "")
        .with_entities(User.profesi, func.count(User.user_id))
        .group_by(User.profesi)
        .order_by(func.count(User.user_id).desc(), User.profesi.asc())
        .limit(limit)
        .all()
    )
    return [{"profesi": profesi, "total": int(total)} for profesi, total in rows]


def recent_alumni(db: Session, limit: int = 5) -> list[User]:
    return _active_alumni(db).order_by(User.created_at.desc(), User.user_id.desc()).limit(limit).all()


def _upcoming_events(db: Session, limit: int = 5) -> list[dict]:
    rows = (
        db.query(Event)
        .filter(Event.is_published == True, Event.event_date >= datetime.now())  # noqa: E712
        .order_by(Event.event_date.asc())
        .limit(limit)
        .all()
    )
    return [event_service.event_payload(row) for row in rows]


def admin_dashboard(db: Session) -> dict:
    active = db.query(User).filter(User.is_active == True)  # noqa: E712
    return {
        "total_users": active.count(),
        "total_alumni": active.filter(User.role == ALUMNI).count(),
        "total_admins": active.filter(User.role == ADMIN).count(),
        "recent_registrations": active.filter(User.created_at >= _recent_cutoff()).count(),
        "alumni_by_year": alumni_by_year(db),
        "alumni_by_profession": alumni_by_profession(db),
        "recent_alumni": recent_alumni(db),
        "gallery": gallery_service.statistics(db),
        "pending_reports": report_service.count_pending(db),
        "upcoming_events": _upcoming_events(db),
    }


def alumni_dashboard(db: Session, current_user: User) -> dict:
    same_year = 0
    if current_user.angkatan:
        same_year = _active_alumni(db).filter(User.angkatan == current_user.angkatan).count()
    return {
        "user_profile": {
            "name": current_user.name,
            "email": current_user.email,
            "angkatan": current_user.angkatan,
            "profesi": current_user.profesi,
            "bio": current_user.bio,
        },
        "statistics": {
            "total_alumni": _active_alumni(db).count(),
            "alumni_in_same_year": same_year,
            "recent_registrations": _active_alumni(db).filter(User.created_at >= _recent_cutoff()).count(),
        },
        "recent_alumni": recent_alumni(db),
        "alumni_by_year": alumni_by_year(db),
        "my_registrations": event_service.list_user_registrations(db, current_user.user_id, upcoming_only=True),
    }
