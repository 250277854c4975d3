"""Forum 신고 접수와 관리자 검토 흐름입니다."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.forum import ForumDiscussion, ForumReply, ForumReport
from app.models.user import User
from app.schemas.forum import ReportCreate, ReportReview
from app.services import forum_service, notification_service
from app.utils.helpers import excerpt_from
from app.utils.permissions import ensure_admin
from app.utils.workflow import (
    REPORT_TRANSITIONS,
    ReportStatus,
    ReportTarget,
    ensure_transition,
)

logger = logging.getLogger(__name__)

OPEN_STATUSES = (ReportStatus.PENDING.value, ReportStatus.REVIEWED.value)
CONTENT_DELETED_NOTE = "Konten telah dihapus oleh moderator."


def _find_target(db: Session, target_type: str, target_id: int):
    if target_type == ReportTarget.DISCUSSION.value:
        return (
            db.query(ForumDiscussion)
            .filter(ForumDiscussion.discussion_id == int(target_id), ForumDiscussion.deleted_at.is_(None))
            .first()
        )
    # 삭제된 토론에 속한 댓글은 존재하지 않는 것으로 본다.
    return (
        db.query(ForumReply)
        .join(ForumDiscussion, ForumDiscussion.discussion_id == ForumReply.discussion_id)
        .filter(
            ForumReply.reply_id == int(target_id),
            ForumReply.deleted_at.is_(None),
            ForumDiscussion.deleted_at.is_(None),
        )
        .first()
    )


def _serialize(db: Session, report: ForumReport) -> ForumReport:
    target = _find_target(db, report.target_type, report.target_id)
    if target is None:
        excerpt = None
    elif isinstance(target, ForumDiscussion):
        excerpt = target.title
    else:
        excerpt = excerpt_from(target.content, 100)
    setattr(report, "target_exists", target is not None)
    setattr(report, "target_excerpt", excerpt)
    setattr(report, "reviewer_name", report.reviewer.name if report.reviewer is not None else None)
    return report


def _get_report(db: Session, report_id: int) -> ForumReport:
    report = db.query(ForumReport).filter(ForumReport.report_id == int(report_id)).first()
    if not report:
        raise HTTPException(status_code=404, detail="Laporan tidak ditemukan.")
    return report


def create_report(db: Session, data: ReportCreate, current_user: User) -> ForumReport:
    target = _find_target(db, data.target_type.value, data.target_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Konten yang dilaporkan tidak ditemukan.")
    duplicate = (
        db.query(ForumReport.report_id)
        .filter(
            ForumReport.user_id == current_user.user_id,
            ForumReport.target_type == data.target_type.value,
            ForumReport.target_id == data.target_id,
            ForumReport.status == ReportStatus.PENDING.value,
        )
        .first()
    )
    if duplicate:
        raise HTTPException(status_code=400, detail="Anda sudah melaporkan konten ini.")

    report = ForumReport(
        user_id=current_user.user_id,
        target_type=data.target_type.value,
        target_id=data.target_id,
        reason=data.reason.value,
        description=data.description,
        status=ReportStatus.PENDING.value,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    notification_service.notify_admins(
        db,
        noti_type="forum_report",
        title="Laporan konten forum baru",
        message=f"{current_user.name} melaporkan {data.target_type.value} dengan alasan {data.reason.value}.",
        link_url=f"/admin/forum/reports/{report.report_id}",
        exclude_user_id=current_user.user_id,
    )
    logger.info(
        "[report] created report_id=%s target=%s:%s by=%s",
        report.report_id, report.target_type, report.target_id, current_user.user_id,
    )
    return _serialize(db, report)


def list_reports(
    db: Session,
    current_user: User,
    status: Optional[ReportStatus] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[ForumReport]:
    ensure_admin(current_user)
    q = db.query(ForumReport)
    if status is not None:
        q = q.filter(ForumReport.status == ReportStatus(status).value)
    rows = q.order_by(ForumReport.created_at.desc(), ForumReport.report_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(db, row) for row in rows]


def get_report(db: Session, report_id: int, current_user: User) -> ForumReport:
    ensure_admin(current_user)
    return _serialize(db, _get_report(db, report_id))


def count_pending(db: Session) -> int:
    return db.query(ForumReport).filter(ForumReport.status == ReportStatus.PENDING.value).count()


def _delete_target(db: Session, report: ForumReport) -> bool:
    target = _find_target(db, report.target_type, report.target_id)
    if target is None:
        return False
    if isinstance(target, ForumDiscussion):
        forum_service.soft_delete_discussion(db, target)
    else:
        forum_service.soft_delete_reply(db, target)
    return True


def _close_sibling_reports(db: Session, report: ForumReport, current_user: User):
    # 같은 대상에 대한 다른 미처리 신고도 함께 종료한다.
    db.query(ForumReport).filter(
        ForumReport.report_id != report.report_id,
        ForumReport.target_type == report.target_type,
        ForumReport.target_id == report.target_id,
        ForumReport.status.in_(OPEN_STATUSES),
    ).update(
        {
            "status": ReportStatus.RESOLVED.value,
            "reviewed_by": current_user.user_id,
            "reviewed_at": datetime.now(),
        },
        synchronize_session=False,
    )


def _notify_reporter(db: Session, report: ForumReport):
    notification_service.create_notification(
        db,
        user_id=int(report.user_id),
        noti_type="forum_report_reviewed",
        title="Laporan Anda telah ditinjau",
        message=f"Status laporan Anda sekarang: {report.status}.",
        link_url=None,
        commit=False,
    )


def review_report(db: Session, report_id: int, data: ReportReview, current_user: User) -> ForumReport:
    ensure_admin(current_user)
    report = _get_report(db, report_id)
    current = ReportStatus(report.status)
    target = ReportStatus(data.status)
    if data.delete_content and target != ReportStatus.RESOLVED:
        raise HTTPException(
            status_code=400,
            detail="Konten hanya dapat dihapus ketika laporan diselesaikan (resolved).",
        )
    # 종료 상태(resolved/rejected)와 같은 상태로의 재검토는 전이 표에서 거부된다.
    ensure_transition(REPORT_TRANSITIONS, current, target)

    report.status = target.value
    report.reviewed_by = current_user.user_id
    report.reviewed_at = datetime.now()
    if data.admin_notes is not None:
        report.admin_notes = data.admin_notes

    deleted = False
    if data.delete_content:
        deleted = _delete_target(db, report)
        _close_sibling_reports(db, report, current_user)
    if target in (ReportStatus.RESOLVED, ReportStatus.REJECTED):
        _notify_reporter(db, report)
    db.commit()
    db.refresh(report)
    logger.info(
        "[report] report_id=%s %s->%s content_deleted=%s by=%s",
        report.report_id, current.value, target.value, deleted, current_user.user_id,
    )
    return _serialize(db, report)


def delete_reported_content(db: Session, report_id: int, current_user: User) -> ForumReport:
    ensure_admin(current_user)
    report = _get_report(db, report_id)
    current = ReportStatus(report.status)
    if current != ReportStatus.RESOLVED:
        ensure_transition(REPORT_TRANSITIONS, current, ReportStatus.RESOLVED)
    if not _delete_target(db, report):
        raise HTTPException(status_code=404, detail="Konten yang dilaporkan tidak ditemukan.")
    report.status = ReportStatus.RESOLVED.value
    report.reviewed_by = current_user.user_id
    report.reviewed_at = datetime.now()
    if not report.admin_notes:
        report.admin_notes = CONTENT_DELETED_NOTE
    _close_sibling_reports(db, report, current_user)
    if current != ReportStatus.RESOLVED:
        _notify_reporter(db, report)
    db.commit()
    db.refresh(report)
    logger.info("[report] content deleted via report_id=%s by=%s", report.report_id, current_user.user_id)
    return _serialize(db, report)
