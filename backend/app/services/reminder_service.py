"""다가오는 행사 참가자에게 리마인더 알림을 보내는 일일 배치입니다.

외부 스케줄러가 ``python -m app.cli events:send-reminders`` 로 하루 한 번 호출합니다.
한 사용자에게 알림 저장이 실패해도 나머지 참가자 처리는 계속합니다.
"""

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.event import Event, EventRegistration
from app.services import notification_service
from app.utils.workflow import RegistrationStatus

logger = logging.getLogger(__name__)


def _target_window(today: date, days_ahead: int) -> tuple[datetime, datetime]:
    target = today + timedelta(days=days_ahead)
    start = datetime.combine(target, time.min)
    return start, start + timedelta(days=1)


def send_event_reminders(db: Session, today: date | None = None, days_ahead: int | None = None) -> dict:
    today = today or date.today()
    days_ahead = settings.EVENT_REMINDER_DAYS_AHEAD if days_ahead is None else int(days_ahead)
    start, end = _target_window(today, days_ahead)

    events = (
        db.query(Event)
        .filter(
            Event.is_published == True,  # noqa: E712
            Event.event_date >= start,
            Event.event_date < end,
        )
        .order_by(Event.event_date.asc(), Event.event_id.asc())
        .all()
    )

    summary = {"events": len(events), "reminders": 0, "failed": 0, "per_event": []}
    for event in events:
        user_ids = [
            int(row[0])
            for row in db.query(EventRegistration.user_id)
            .filter(
                EventRegistration.event_id == event.event_id,
                EventRegistration.status == RegistrationStatus.REGISTERED.value,
            )
            .order_by(EventRegistration.registration_id.asc())
            .all()
        ]
        sent = 0
        failed = 0
        when = event.event_date.strftime("%d %b %Y %H:%M")
        for user_id in user_ids:
            try:
                notification_service.create_notification(
                    db,
                    user_id=user_id,
                    noti_type="event_reminder",
                    title="Pengingat event",
                    message=f"Event \"{event.title}\" akan berlangsung pada {when}.",
                    link_url=f"/events/{event.event_id}",
                )
                sent += 1
            except SQLAlchemyError:
                db.rollback()
                failed += 1
                logger.exception(
                    "[reminder] failed to notify user_id=%s event_id=%s", user_id, event.event_id
                )
        summary["reminders"] += sent
        summary["failed"] += failed
        summary["per_event"].append(
            {"event_id": int(event.event_id), "title": event.title, "sent": sent, "failed": failed}
        )
        logger.info("[reminder] event_id=%s sent=%s failed=%s", event.event_id, sent, failed)

    logger.info(
        "[reminder] sweep done date=%s events=%s reminders=%s failed=%s",
        start.date(), summary["events"], summary["reminders"], summary["failed"],
    )
    return summary
