"""관리자/동문 대시보드 집계 결과를 검증하는 테스트입니다."""

from datetime import datetime, timedelta

from tests.conftest import auth_headers, make_event


def test_admin_dashboard_counts(client, db, seed_users):
    seed_users["andi"].is_active = False
    db.commit()
    make_event(db, seed_users["admin"], title="Seminar")
    make_event(db, seed_users["admin"], title="Konsep", is_published=False)

    resp = client.get("/api/dashboard/admin", headers=auth_headers(client, "admin@ikapsi.test"))
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["total_users"] == 3
    assert data["total_alumni"] == 2
    assert data["total_admins"] == 1
    assert data["alumni_by_year"] == [{"year": "2015", "total": 2}]
    assert {row["profesi"] for row in data["alumni_by_profession"]} == {"Software Engineer", "Dokter"}
    assert data["pending_reports"] == 0
    assert data["gallery"]["total"] == 0
    assert [row["title"] for row in data["upcoming_events"]] == ["Seminar"]


def test_admin_dashboard_forbidden_for_alumni(client, seed_users):
    resp = client.get("/api/dashboard/admin", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.status_code == 403


def test_alumni_dashboard_lists_upcoming_registrations(client, db, seed_users):
    admin = seed_users["admin"]
    upcoming = make_event(db, admin, title="Reuni 2015")
    past = make_event(
        db,
        admin,
        title="Bakti Sosial",
        event_date=datetime.now() + timedelta(hours=2),
        registration_deadline=datetime.now() + timedelta(hours=1),
    )
    headers = auth_headers(client, "budi@ikapsi.test")
    assert client.post(f"/api/events/{upcoming.event_id}/register", headers=headers).status_code == 200
    assert client.post(f"/api/events/{past.event_id}/register", headers=headers).status_code == 200
    past.event_date = datetime.now() - timedelta(days=1)
    db.commit()

    resp = client.get("/api/dashboard/alumni", headers=headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["user_profile"]["email"] == "budi@ikapsi.test"
    assert data["statistics"]["total_alumni"] == 3
    assert data["statistics"]["alumni_in_same_year"] == 2
    assert [row["event"]["title"] for row in data["my_registrations"]] == ["Reuni 2015"]
    assert data["my_registrations"][0]["status"] == "registered"
