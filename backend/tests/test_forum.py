"""Forum 토론/댓글/좋아요와 고정·잠금 동작을 검증하는 테스트입니다."""

from app.models.notification import Notification
from tests.conftest import auth_headers


def _create_discussion(client, headers, category_id, title="Lowongan kerja 2026"):
    resp = client.post(
        "/api/forum/discussions",
        json={"category_id": category_id, "title": title, "content": "Silakan berbagi info lowongan."},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _notifications(db, user_id, noti_type=None):
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if noti_type:
        q = q.filter(Notification.noti_type == noti_type)
    return q.all()


def test_category_management_is_admin_only(client, seed_users):
    payload = {"name": "Karier & Lowongan", "description": "Info kerja"}
    assert client.post("/api/forum/categories", json=payload, headers=auth_headers(client, "budi@ikapsi.test")).status_code == 403

    resp = client.post("/api/forum/categories", json=payload, headers=auth_headers(client, "admin@ikapsi.test"))
    assert resp.status_code == 201
    assert resp.json()["slug"] == "karier-lowongan"

    listed = client.get("/api/forum/categories", headers=auth_headers(client, "budi@ikapsi.test")).json()
    assert listed[0]["discussions_count"] == 0


def test_discussion_slug_is_unique(client, seed_users, seed_forum_category):
    headers = auth_headers(client, "budi@ikapsi.test")
    first = _create_discussion(client, headers, seed_forum_category.category_id, title="Halo Semua")
    second = _create_discussion(client, headers, seed_forum_category.category_id, title="Halo Semua")
    assert first["slug"] == "halo-semua"
    assert second["slug"] == "halo-semua-1"


def test_views_are_counted_once_per_user(client, seed_users, seed_forum_category):
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    sari_headers = auth_headers(client, "sari@ikapsi.test")
    url = f"/api/forum/discussions/{discussion['discussion_id']}"

    client.get(url, headers=sari_headers)
    detail = client.get(url, headers=sari_headers).json()
    assert detail["discussion"]["views_count"] == 1
    assert detail["can_edit"] is False

    owner_view = client.get(url, headers=auth_headers(client, "budi@ikapsi.test")).json()
    assert owner_view["discussion"]["views_count"] == 2
    assert owner_view["can_edit"] is True


def test_reply_notifies_owner_and_parent_author_once(client, db, seed_users, seed_forum_category):
    budi, sari, andi = seed_users["budi"], seed_users["sari"], seed_users["andi"]
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    replies_url = f"/api/forum/discussions/{discussion['discussion_id']}/replies"

    first = client.post(replies_url, json={"content": "Saya tertarik"}, headers=auth_headers(client, "sari@ikapsi.test"))
    assert first.status_code == 201
    nested = client.post(
        replies_url,
        json={"content": "Saya juga", "parent_id": first.json()["reply_id"]},
        headers=auth_headers(client, "andi@ikapsi.test"),
    )
    assert nested.status_code == 201
    assert nested.json()["parent_id"] == first.json()["reply_id"]

    own = client.post(replies_url, json={"content": "Terima kasih"}, headers=auth_headers(client, "budi@ikapsi.test"))
    assert own.status_code == 201

    assert len(_notifications(db, budi.user_id, "forum_reply")) == 2
    assert len(_notifications(db, sari.user_id, "forum_reply_reply")) == 1
    assert _notifications(db, andi.user_id) == []

    detail = client.get(f"/api/forum/discussions/{discussion['discussion_id']}", headers=auth_headers(client, "budi@ikapsi.test")).json()
    assert detail["discussion"]["replies_count"] == 3
    assert [r["content"] for r in detail["replies"]] == ["Saya tertarik", "Saya juga", "Terima kasih"]


def test_locked_discussion_rejects_replies_from_everyone(client, seed_users, seed_forum_category):
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    admin_headers = auth_headers(client, "admin@ikapsi.test")
    url = f"/api/forum/discussions/{discussion['discussion_id']}"

    assert client.post(f"{url}/lock", headers=auth_headers(client, "budi@ikapsi.test")).status_code == 403
    locked = client.post(f"{url}/lock", headers=admin_headers)
    assert locked.json()["is_locked"] is True

    for headers in (auth_headers(client, "sari@ikapsi.test"), auth_headers(client, "budi@ikapsi.test"), admin_headers):
        resp = client.post(f"{url}/replies", json={"content": "Halo"}, headers=headers)
        assert resp.status_code == 400
        assert "dikunci" in resp.json()["detail"]

    unlocked = client.post(f"{url}/lock", headers=admin_headers)
    assert unlocked.json()["is_locked"] is False
    assert client.post(f"{url}/replies", json={"content": "Halo"}, headers=admin_headers).status_code == 201


def test_like_toggle_is_idempotent_per_user(client, db, seed_users, seed_forum_category):
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    sari_headers = auth_headers(client, "sari@ikapsi.test")
    like_url = f"/api/forum/discussions/{discussion['discussion_id']}/like"

    liked = client.post(like_url, headers=sari_headers).json()
    assert liked == {"liked": True, "likes_count": 1}
    other = client.post(like_url, headers=auth_headers(client, "andi@ikapsi.test")).json()
    assert other == {"liked": True, "likes_count": 2}
    unliked = client.post(like_url, headers=sari_headers).json()
    assert unliked == {"liked": False, "likes_count": 1}

    self_like = client.post(like_url, headers=auth_headers(client, "budi@ikapsi.test")).json()
    assert self_like["likes_count"] == 2
    # 본인 좋아요는 알림을 만들지 않는다.
    assert len(_notifications(db, seed_users["budi"].user_id, "forum_like")) == 2


def test_reply_like_toggle(client, seed_users, seed_forum_category):
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    reply = client.post(
        f"/api/forum/discussions/{discussion['discussion_id']}/replies",
        json={"content": "Info bagus"},
        headers=auth_headers(client, "sari@ikapsi.test"),
    ).json()
    resp = client.post(f"/api/forum/replies/{reply['reply_id']}/like", headers=auth_headers(client, "budi@ikapsi.test"))
    assert resp.json() == {"liked": True, "likes_count": 1}


def test_pinned_discussions_listed_first(client, seed_users, seed_forum_category):
    headers = auth_headers(client, "budi@ikapsi.test")
    older = _create_discussion(client, headers, seed_forum_category.category_id, title="Pengumuman")
    _create_discussion(client, headers, seed_forum_category.category_id, title="Obrolan santai")
    client.post(f"/api/forum/discussions/{older['discussion_id']}/pin", headers=auth_headers(client, "admin@ikapsi.test"))

    listing = client.get("/api/forum/discussions", headers=headers).json()
    assert [d["title"] for d in listing["pinned"]] == ["Pengumuman"]
    assert [d["title"] for d in listing["discussions"]] == ["Obrolan santai"]

    searched = client.get("/api/forum/discussions?search=santai&sort=oldest", headers=headers).json()
    assert searched["pinned"] == []
    assert [d["title"] for d in searched["discussions"]] == ["Obrolan santai"]


def test_only_owner_or_admin_can_delete(client, seed_users, seed_forum_category):
    discussion = _create_discussion(client, auth_headers(client, "budi@ikapsi.test"), seed_forum_category.category_id)
    url = f"/api/forum/discussions/{discussion['discussion_id']}"

    assert client.delete(url, headers=auth_headers(client, "sari@ikapsi.test")).status_code == 403
    assert client.delete(url, headers=auth_headers(client, "admin@ikapsi.test")).status_code == 204
    assert client.get(url, headers=auth_headers(client, "budi@ikapsi.test")).status_code == 404


def test_category_with_removed_discussions_cannot_be_deleted(client, seed_users, seed_forum_category):
    budi_headers = auth_headers(client, "budi@ikapsi.test")
    admin_headers = auth_headers(client, "admin@ikapsi.test")
    discussion = _create_discussion(client, budi_headers, seed_forum_category.category_id)
    assert client.delete(f"/api/forum/discussions/{discussion['discussion_id']}", headers=budi_headers).status_code == 204

    resp = client.delete(f"/api/forum/categories/{seed_forum_category.category_id}", headers=admin_headers)
    assert resp.status_code == 400

    empty = client.post("/api/forum/categories", json={"name": "Kosong"}, headers=admin_headers).json()
    assert client.delete(f"/api/forum/categories/{empty['category_id']}", headers=admin_headers).status_code == 204
