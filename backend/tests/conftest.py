import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base, get_db
from app.main import app
from app.models.user import User
from app.models.event import Event
from app.models.forum import ForumCategory

TEST_DB_URL = "sqlite:///./test_ikapsi.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@ikapsi.test", name="Admin IKAPSI", role="admin"),
        "budi": User(email="budi@ikapsi.test", name="Budi", role="alumni", angkatan="2015", profesi="Software Engineer"),
        "sari": User(email="sari@ikapsi.test", name="Sari", role="alumni", angkatan="2015", profesi="Dokter"),
        "andi": User(email="andi@ikapsi.test", name="Andi", role="alumni", angkatan="2018", profesi="Guru"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def make_event(db, creator, **overrides) -> Event:
    now = datetime.now()
    values = {
        "title": "Reuni Akbar",
        "description": "Temu kangen alumni",
        "location": "Aula Kampus",
        "event_date": now + timedelta(days=7),
        "registration_deadline": now + timedelta(days=5),
        "max_participants": None,
        "is_published": True,
        "created_by": creator.user_id,
        "registered_count": 0,
    }
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


@pytest.fixture
def seed_event(db, seed_users):
    return make_event(db, seed_users["admin"])


@pytest.fixture
def seed_forum_category(db):
    category = ForumCategory(name="Umum", slug="umum", description="Diskusi umum", is_active=True)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
