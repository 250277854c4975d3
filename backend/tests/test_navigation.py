"""역할별 메뉴 계산 함수를 검증하는 테스트입니다."""

from app.utils.navigation import NavItem, build_navigation


def test_admin_menu_contains_management_entries():
    keys = [item.key for item in build_navigation("admin")]
    assert keys[0] == "dashboard"
    assert {"users", "events", "gallery", "forum_reports", "article_categories"} <= set(keys)


def test_alumni_menu():
    items = build_navigation("alumni")
    assert all(isinstance(item, NavItem) for item in items)
    keys = [item.key for item in items]
    assert {"directory", "events", "gallery", "my_articles", "forum", "notifications"} <= set(keys)
    assert "users" not in keys


def test_role_is_normalized_and_unknown_falls_back_to_alumni():
    assert build_navigation("ADMIN") == build_navigation("admin")
    assert build_navigation("guest") == build_navigation("alumni")
    assert build_navigation(None) == build_navigation("alumni")


def test_each_call_returns_a_fresh_list():
    first = build_navigation("alumni")
    first.clear()
    assert build_navigation("alumni")
