"""Seed the database with demo alumni data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, timedelta
from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.event import Event
from app.models.forum import ForumCategory
from app.models.article import ArticleCategory


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [
            User(email="admin@ikapsi.id", name="Admin IKAPSI", role="admin"),
            User(email="budi@ikapsi.id", name="Budi Santoso", role="alumni", angkatan="2015",
                 profesi="Software Engineer", bio="Backend developer di Jakarta"),
            User(email="sari@ikapsi.id", name="Sari Wulandari", role="alumni", angkatan="2015", profesi="Dokter"),
            User(email="andi@ikapsi.id", name="Andi Pratama", role="alumni", angkatan="2018", profesi="Guru"),
        ]
        db.add_all(users)
        db.flush()

        forum_categories = [
            ForumCategory(name="Umum", slug="umum", description="Obrolan umum antar alumni", display_order=1),
            ForumCategory(name="Karier & Lowongan", slug="karier-lowongan",
                          description="Info lowongan dan pengembangan karier", display_order=2),
            ForumCategory(name="Reuni", slug="reuni", description="Koordinasi acara reuni", display_order=3),
        ]
        db.add_all(forum_categories)

        article_categories = [
            ArticleCategory(name="Inspirasi", slug="inspirasi", display_order=1),
            ArticleCategory(name="Karier", slug="karier", display_order=2),
        ]
        db.add_all(article_categories)

        now = datetime.now().replace(minute=0, second=0, microsecond=0)
        events = [
            Event(title="Reuni Akbar IKAPSI", description="Temu kangen lintas angkatan.",
                  location="Aula Kampus", event_date=now + timedelta(days=30),
                  registration_deadline=now + timedelta(days=25), max_participants=200,
                  is_published=True, created_by=users[0].user_id),
            Event(title="Webinar Karier", description="Berbagi pengalaman dunia kerja.",
                  location="Online", event_date=now + timedelta(days=1, hours=3),
                  registration_deadline=now + timedelta(hours=20),
                  is_published=True, created_by=users[0].user_id),
            Event(title="Bakti Sosial", description="Draft kegiatan sosial alumni.",
                  location="Desa Binaan", event_date=now + timedelta(days=60),
                  is_published=False, created_by=users[0].user_id),
        ]
        db.add_all(events)

        db.commit()
        print("Seed data inserted successfully.")
        print(f"  Users: {len(users)}")
        print(f"  Forum categories: {len(forum_categories)}")
        print(f"  Article categories: {len(article_categories)}")
        print(f"  Events: {len(events)}")
        print()
        print("Test login credentials:")
        for u in users:
            print(f"  email={u.email}  role={u.role}  name={u.name}")

    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
