"""본인 알림 목록, 읽음 처리, 삭제 동작을 검증하는 테스트입니다."""

from app.services import notification_service
from tests.conftest import auth_headers


def _seed_notifications(db, user, count):
    return [
        notification_service.create_notification(db, user.user_id, "welcome", f"Pesan {idx}")
        for idx in range(count)
    ]


def test_list_is_newest_first_and_scoped_to_owner(client, db, seed_users):
    _seed_notifications(db, seed_users["budi"], 3)
    _seed_notifications(db, seed_users["sari"], 1)

    rows = client.get("/api/notifications", headers=auth_headers(client, "budi@ikapsi.test")).json()
    assert [row["title"] for row in rows] == ["Pesan 2", "Pesan 1", "Pesan 0"]
    assert all(row["user_id"] == seed_users["budi"].user_id for row in rows)


def test_unread_returns_latest_ten_and_total_count(client, db, seed_users):
    _seed_notifications(db, seed_users["budi"], 12)
    resp = client.get("/api/notifications/unread", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.status_code == 200
    data = resp.json()
    assert data["unread_count"] == 12
    assert len(data["notifications"]) == 10
    assert data["notifications"][0]["title"] == "Pesan 11"


def test_mark_read_and_read_all(client, db, seed_users):
    first, _second, _third = _seed_notifications(db, seed_users["budi"], 3)
    headers = auth_headers(client, "budi@ikapsi.test")

    read = client.patch(f"/api/notifications/{first.noti_id}/read", headers=headers)
    assert read.status_code == 200
    assert read.json()["is_read"] is True

    unread = client.get("/api/notifications?unread_only=true", headers=headers).json()
    assert len(unread) == 2

    resp = client.post("/api/notifications/read-all", headers=headers)
    assert resp.json()["updated"] == 2
    assert client.get("/api/notifications/unread", headers=headers).json()["unread_count"] == 0


def test_cannot_touch_other_users_notification(client, db, seed_users):
    (noti,) = _seed_notifications(db, seed_users["sari"], 1)
    headers = auth_headers(client, "budi@ikapsi.test")
    assert client.patch(f"/api/notifications/{noti.noti_id}/read", headers=headers).status_code == 404
    assert client.delete(f"/api/notifications/{noti.noti_id}", headers=headers).status_code == 404


def test_delete_one_and_delete_all(client, db, seed_users):
    rows = _seed_notifications(db, seed_users["budi"], 3)
    _seed_notifications(db, seed_users["sari"], 1)
    headers = auth_headers(client, "budi@ikapsi.test")

    assert client.delete(f"/api/notifications/{rows[0].noti_id}", headers=headers).status_code == 204
    assert len(client.get("/api/notifications", headers=headers).json()) == 2

    resp = client.delete("/api/notifications", headers=headers)
    assert resp.json()["deleted"] == 2
    assert client.get("/api/notifications", headers=headers).json() == []

    sari_rows = client.get("/api/notifications", headers=auth_headers(client, "sari@ikapsi.test")).json()
    assert len(sari_rows) == 1


def test_notify_users_skips_duplicates_and_actor(db, seed_users):
    budi, sari = seed_users["budi"], seed_users["sari"]
    sent = notification_service.notify_users(
        db,
        [budi.user_id, sari.user_id, budi.user_id],
        "forum_reply",
        "Balasan baru",
        exclude_user_id=sari.user_id,
    )
    assert sent == 1
    assert len(notification_service.get_notifications(db, budi.user_id)) == 1
    assert notification_service.get_notifications(db, sari.user_id) == []
