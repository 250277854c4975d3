"""운영용 명령행 진입점입니다.

Usage:
  python -m app.cli init-db
  python -m app.cli events:send-reminders
  python -m app.cli gallery:purge-deleted --days 30
"""
import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import Base, SessionLocal, engine
import app.models  # noqa: F401 - registers all models
from app.services import gallery_service, reminder_service
from app.utils.schema_sync import sync_missing_schema_objects

logger = logging.getLogger(__name__)


def init_db(_args) -> int:
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    added = sync_missing_schema_objects(engine, Base.metadata)
    for item in added:
        print(f"  added: {item}")
    print("Database initialized successfully.")
    return 0


def send_reminders(_args) -> int:
    db = SessionLocal()
    try:
        result = reminder_service.send_event_reminders(db)
    except SQLAlchemyError:
        # 종료 코드는 항상 0 이다.
        logger.exception("[reminder] sweep aborted")
        print("Reminder sweep failed; see log for details.")
        return 0
    finally:
        db.close()

    if not result["events"]:
        print("No events scheduled for tomorrow.")
    for row in result["per_event"]:
        print(f"Event #{row['event_id']} {row['title']}: {row['sent']} reminder(s) sent, {row['failed']} failed")
    print(f"Sent {result['reminders']} reminder(s) for {result['events']} event(s); {result['failed']} failed.")
    return 0


def purge_gallery(args) -> int:
    db = SessionLocal()
    try:
        purged = gallery_service.purge_deleted(db, older_than_days=args.days)
    finally:
        db.close()
    print(f"Purged {purged} deleted gallery item(s).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="app.cli")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create missing tables and columns").set_defaults(func=init_db)
    sub.add_parser(
        "events:send-reminders",
        help="Notify registered participants of tomorrow's events",
    ).set_defaults(func=send_reminders)

    purge = sub.add_parser("gallery:purge-deleted", help="Permanently remove soft-deleted gallery items")
    purge.add_argument("--days", type=int, default=30, help="Only items deleted more than N days ago")
    purge.set_defaults(func=purge_gallery)
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
