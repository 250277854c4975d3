"""행사 참가 신청/취소와 관리자 상태 변경 흐름을 검증하는 테스트입니다."""

from datetime import datetime, timedelta

from app.models.event import Event, EventRegistration
from app.models.notification import Notification
from tests.conftest import auth_headers, make_event


def _registrations(db, event_id):
    db.expire_all()
    return db.query(EventRegistration).filter(EventRegistration.event_id == event_id).all()


def test_list_and_detail_expose_registration_flags(client, seed_users, seed_event):
    headers = auth_headers(client, "budi@ikapsi.test")

    resp = client.get("/api/events", headers=headers)
    assert resp.status_code == 200
    rows = resp.json()
    assert [r["event_id"] for r in rows] == [seed_event.event_id]
    assert rows[0]["is_registered"] is False
    assert rows[0]["can_register"] is True

    client.post(f"/api/events/{seed_event.event_id}/register", headers=headers)
    detail = client.get(f"/api/events/{seed_event.event_id}", headers=headers).json()
    assert detail["is_registered"] is True
    assert detail["can_register"] is False
    assert detail["reason"] == "Anda sudah terdaftar"
    assert detail["registrations_count"] == 1


def test_unpublished_event_hidden_from_alumni(client, db, seed_users):
    draft = make_event(db, seed_users["admin"], is_published=False)
    headers = auth_headers(client, "budi@ikapsi.test")

    assert client.get("/api/events", headers=headers).json() == []
    assert client.get(f"/api/events/{draft.event_id}", headers=headers).status_code == 404
    assert client.post(f"/api/events/{draft.event_id}/register", headers=headers).status_code == 404


def test_register_creates_row_and_confirmation(client, db, seed_users, seed_event):
    headers = auth_headers(client, "budi@ikapsi.test")
    resp = client.post(f"/api/events/{seed_event.event_id}/register", headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "registered"

    rows = _registrations(db, seed_event.event_id)
    assert len(rows) == 1
    assert db.get(Event, seed_event.event_id).registered_count == 1
    noti = db.query(Notification).filter(Notification.user_id == seed_users["budi"].user_id).all()
    assert [n.noti_type for n in noti] == ["event_registration_confirmed"]


def test_second_registration_refused_when_capacity_reached(client, db, seed_users):
    event = make_event(db, seed_users["admin"], max_participants=1)

    first = client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    assert first.status_code == 200

    second = client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "sari@ikapsi.test"))
    assert second.status_code == 400
    assert "penuh" in second.json()["detail"]

    assert len(_registrations(db, event.event_id)) == 1
    assert db.get(Event, event.event_id).registered_count == 1


def test_duplicate_registration_refused(client, seed_users, seed_event):
    headers = auth_headers(client, "budi@ikapsi.test")
    assert client.post(f"/api/events/{seed_event.event_id}/register", headers=headers).status_code == 200
    again = client.post(f"/api/events/{seed_event.event_id}/register", headers=headers)
    assert again.status_code == 400
    assert "sudah terdaftar" in again.json()["detail"]


def test_registration_after_deadline_refused(client, db, seed_users):
    now = datetime.now()
    event = make_event(
        db,
        seed_users["admin"],
        event_date=now + timedelta(days=2),
        registration_deadline=now - timedelta(hours=1),
    )
    resp = client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.status_code == 400
    assert "ditutup" in resp.json()["detail"]


def test_cancel_then_reregister_reuses_single_row(client, db, seed_users):
    event = make_event(db, seed_users["admin"], max_participants=1)
    headers = auth_headers(client, "budi@ikapsi.test")

    assert client.post(f"/api/events/{event.event_id}/register", headers=headers).status_code == 200
    cancel = client.delete(f"/api/events/{event.event_id}/register", headers=headers)
    assert cancel.status_code == 200
    assert cancel.json()["status"] == "cancelled"
    db.expire_all()
    assert db.get(Event, event.event_id).registered_count == 0

    # 취소로 비워진 자리는 다른 동문이 신청할 수 있다.
    sari = client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "sari@ikapsi.test"))
    assert sari.status_code == 200
    assert client.post(f"/api/events/{event.event_id}/register", headers=headers).status_code == 400

    client.delete(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "sari@ikapsi.test"))
    again = client.post(f"/api/events/{event.event_id}/register", headers=headers)
    assert again.status_code == 200

    rows = [r for r in _registrations(db, event.event_id) if r.user_id == seed_users["budi"].user_id]
    assert len(rows) == 1
    assert rows[0].status == "registered"


def test_cancel_without_registration_refused(client, seed_users, seed_event):
    resp = client.delete(f"/api/events/{seed_event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.status_code == 400


def test_cancel_after_event_started_refused(client, db, seed_users):
    now = datetime.now()
    event = make_event(
        db,
        seed_users["admin"],
        event_date=now - timedelta(hours=1),
        registration_deadline=now - timedelta(days=1),
        registered_count=1,
    )
    db.add(EventRegistration(event_id=event.event_id, user_id=seed_users["budi"].user_id, status="registered"))
    db.commit()

    resp = client.delete(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.status_code == 400
    assert _registrations(db, event.event_id)[0].status == "registered"


def test_admin_status_transitions(client, db, seed_users):
    event = make_event(db, seed_users["admin"], max_participants=1)
    budi = seed_users["budi"]
    admin_headers = auth_headers(client, "admin@ikapsi.test")
    client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    url = f"/api/admin/events/{event.event_id}/registrations/{budi.user_id}"

    attended = client.patch(url, json={"status": "attended"}, headers=admin_headers)
    assert attended.status_code == 200
    assert attended.json()["status"] == "attended"

    invalid = client.patch(url, json={"status": "cancelled"}, headers=admin_headers)
    assert invalid.status_code == 400

    assert client.patch(url, json={"status": "registered"}, headers=admin_headers).status_code == 200
    assert client.patch(url, json={"status": "cancelled"}, headers=admin_headers).status_code == 200
    db.expire_all()
    assert db.get(Event, event.event_id).registered_count == 0

    client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, "sari@ikapsi.test"))
    full = client.patch(url, json={"status": "registered"}, headers=admin_headers)
    assert full.status_code == 400

    unknown = client.patch(url, json={"status": "waitlisted"}, headers=admin_headers)
    assert unknown.status_code == 422

    kinds = {
        n.noti_type
        for n in db.query(Notification).filter(Notification.user_id == budi.user_id).all()
    }
    assert "event_registration_status_changed" in kinds


def test_admin_endpoints_forbidden_for_alumni(client, seed_users, seed_event):
    headers = auth_headers(client, "budi@ikapsi.test")
    assert client.get("/api/admin/events", headers=headers).status_code == 403
    assert client.get(f"/api/admin/events/{seed_event.event_id}/registrations", headers=headers).status_code == 403


def test_admin_create_validates_deadline_and_notifies_alumni(client, db, seed_users):
    headers = auth_headers(client, "admin@ikapsi.test")
    event_date = datetime.now() + timedelta(days=10)
    payload = {
        "title": "Seminar Karier",
        "description": "Berbagi pengalaman",
        "location": "Online",
        "event_date": event_date.isoformat(),
        "registration_deadline": (event_date + timedelta(days=1)).isoformat(),
        "max_participants": 50,
        "is_published": True,
    }
    bad = client.post("/api/admin/events", json=payload, headers=headers)
    assert bad.status_code == 422

    payload["registration_deadline"] = (event_date - timedelta(days=1)).isoformat()
    resp = client.post("/api/admin/events", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    assert resp.json()["registrations_count"] == 0

    notified = db.query(Notification).filter(Notification.noti_type == "event_published").count()
    assert notified == 3


def test_admin_cannot_shrink_capacity_below_registrations(client, db, seed_users):
    event = make_event(db, seed_users["admin"], max_participants=5)
    for email in ("budi@ikapsi.test", "sari@ikapsi.test"):
        client.post(f"/api/events/{event.event_id}/register", headers=auth_headers(client, email))

    payload = {
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "event_date": event.event_date.isoformat(),
        "registration_deadline": event.registration_deadline.isoformat(),
        "max_participants": 1,
        "is_published": True,
    }
    resp = client.put(f"/api/admin/events/{event.event_id}", json=payload, headers=auth_headers(client, "admin@ikapsi.test"))
    assert resp.status_code == 400


def test_admin_lists_registrations(client, seed_users, seed_event):
    client.post(f"/api/events/{seed_event.event_id}/register", headers=auth_headers(client, "budi@ikapsi.test"))
    resp = client.get(
        f"/api/admin/events/{seed_event.event_id}/registrations",
        headers=auth_headers(client, "admin@ikapsi.test"),
    )
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 1
    assert rows[0]["user"]["name"] == "Budi"
