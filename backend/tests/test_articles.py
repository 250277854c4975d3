"""기고 글 작성, 게시 전환, 조회수, 카테고리 관리 동작을 검증하는 테스트입니다."""

import pytest

from app.services.article_service import reading_time
from tests.conftest import auth_headers


def _create(client, headers, **overrides):
    payload = {"title": "Kiat Karier di Bidang IT", "content": "<p>Belajar terus.</p>", "is_published": True}
    payload.update(overrides)
    resp = client.post("/api/articles", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def category(client, seed_users):
    resp = client.post(
        "/api/article-categories",
        json={"name": "Karier", "description": "Tips kerja"},
        headers=auth_headers(client, "admin@ikapsi.test"),
    )
    assert resp.status_code == 201
    return resp.json()


def test_reading_time_has_one_minute_floor():
    assert reading_time("") == 1
    assert reading_time("kata " * 200) == 1
    assert reading_time("<p>" + "kata " * 201 + "</p>") == 2


def test_create_generates_slug_and_excerpt(client, seed_users):
    headers = auth_headers(client, "budi@ikapsi.test")
    long_content = "<p>" + ("alumni " * 40) + "</p>"
    first = _create(client, headers, content=long_content)
    second = _create(client, headers)

    assert first["slug"] == "kiat-karier-di-bidang-it"
    assert second["slug"] == "kiat-karier-di-bidang-it-1"
    assert "<p>" not in first["excerpt"]
    assert first["excerpt"].endswith("...")
    assert len(first["excerpt"]) <= 163
    assert first["published_at"] is not None

    explicit = _create(client, headers, title="Lain", excerpt="Ringkasan saya")
    assert explicit["excerpt"] == "Ringkasan saya"


def test_draft_visible_only_to_owner_and_admin(client, seed_users):
    budi_headers = auth_headers(client, "budi@ikapsi.test")
    draft = _create(client, budi_headers, is_published=False)
    assert draft["published_at"] is None
    url = f"/api/articles/{draft['slug']}"

    assert client.get(url).status_code == 404
    assert client.get(url, headers=auth_headers(client, "sari@ikapsi.test")).status_code == 404
    assert client.get(url, headers=budi_headers).status_code == 200
    assert client.get(url, headers=auth_headers(client, "admin@ikapsi.test")).status_code == 200
    assert client.get("/api/articles").json() == []


def test_published_article_views_increment(client, seed_users):
    article = _create(client, auth_headers(client, "budi@ikapsi.test"))
    client.get(f"/api/articles/{article['slug']}")
    second = client.get(f"/api/articles/{article['slug']}")
    assert second.status_code == 200
    assert second.json()["views_count"] == 2

    popular = client.get("/api/articles/popular").json()
    assert popular[0]["article_id"] == article["article_id"]


def test_toggle_publish_keeps_first_published_at(client, seed_users):
    headers = auth_headers(client, "budi@ikapsi.test")
    article = _create(client, headers)
    url = f"/api/articles/{article['article_id']}/toggle-publish"

    unpublished = client.post(url, headers=headers).json()
    assert unpublished["is_published"] is False
    republished = client.post(url, headers=headers).json()
    assert republished["is_published"] is True
    assert republished["published_at"] == article["published_at"]

    assert client.post(url, headers=auth_headers(client, "sari@ikapsi.test")).status_code == 403


def test_my_articles_filtered_by_status(client, seed_users):
    headers = auth_headers(client, "budi@ikapsi.test")
    _create(client, headers, title="Terbit")
    _create(client, headers, title="Konsep", is_published=False)
    _create(client, auth_headers(client, "sari@ikapsi.test"), title="Punya Sari")

    assert len(client.get("/api/articles/mine", headers=headers).json()) == 2
    drafts = client.get("/api/articles/mine?status=draft", headers=headers).json()
    assert [row["title"] for row in drafts] == ["Konsep"]
    published = client.get("/api/articles/mine?status=published", headers=headers).json()
    assert [row["title"] for row in published] == ["Terbit"]


def test_update_and_delete_only_by_owner_or_admin(client, seed_users):
    article = _create(client, auth_headers(client, "budi@ikapsi.test"))
    url = f"/api/articles/{article['article_id']}"

    assert client.put(url, json={"title": "Ubah"}, headers=auth_headers(client, "sari@ikapsi.test")).status_code == 403
    updated = client.put(url, json={"title": "Kiat Baru"}, headers=auth_headers(client, "admin@ikapsi.test"))
    assert updated.status_code == 200
    assert updated.json()["slug"] == "kiat-baru"

    assert client.delete(url, headers=auth_headers(client, "admin@ikapsi.test")).status_code == 204
    assert client.get(f"/api/articles/id/{article['article_id']}", headers=auth_headers(client, "budi@ikapsi.test")).status_code == 404


def test_category_filter_and_deletion_detaches_articles(client, seed_users, category):
    headers = auth_headers(client, "budi@ikapsi.test")
    in_category = _create(client, headers, title="Dalam Kategori", category_id=category["category_id"])
    _create(client, headers, title="Tanpa Kategori")

    filtered = client.get(f"/api/articles?category={category['slug']}").json()
    assert [row["title"] for row in filtered] == ["Dalam Kategori"]
    assert filtered[0]["category_name"] == "Karier"

    admin_headers = auth_headers(client, "admin@ikapsi.test")
    assert client.delete(f"/api/article-categories/{category['category_id']}", headers=admin_headers).status_code == 204

    detached = client.get(f"/api/articles/{in_category['slug']}").json()
    assert detached["category_id"] is None
    assert detached["category_name"] is None


def test_category_management_is_admin_only(client, seed_users, category):
    headers = auth_headers(client, "budi@ikapsi.test")
    assert client.post("/api/article-categories", json={"name": "Hobi"}, headers=headers).status_code == 403
    assert client.get("/api/article-categories/all", headers=headers).status_code == 403

    admin_headers = auth_headers(client, "admin@ikapsi.test")
    hidden = client.put(
        f"/api/article-categories/{category['category_id']}", json={"is_active": False}, headers=admin_headers
    )
    assert hidden.status_code == 200
    assert client.get("/api/article-categories").json() == []
    assert len(client.get("/api/article-categories/all", headers=admin_headers).json()) == 1
