"""역할별 메뉴 구성을 계산합니다.

메뉴는 전역 상태로 두지 않고 요청마다 역할 값으로부터 새로 만듭니다.
"""

from dataclasses import dataclass
from typing import List

from app.utils.permissions import ADMIN, normalize_role


@dataclass(frozen=True)
class NavItem:
    key: str
    title: str
    href: str
    icon: str


_ADMIN_MENU = (
    ("dashboard", "Dashboard", "/admin/dashboard", "layout-grid"),
    ("users", "Manajemen Pengguna", "/admin/users", "users"),
    ("events", "Manajemen Event", "/admin/events", "calendar"),
    ("gallery", "Moderasi Galeri", "/admin/gallery", "image"),
    ("article_categories", "Kategori Artikel", "/admin/articles/categories", "folder"),
    ("forum", "Forum Diskusi", "/forum", "message-square"),
    ("forum_reports", "Laporan Forum", "/admin/forum/reports", "flag"),
    ("notifications", "Notifikasi", "/notifications", "bell"),
)

_ALUMNI_MENU = (
    ("dashboard", "Dashboard", "/dashboard", "layout-grid"),
    ("directory", "Direktori Alumni", "/alumni/directory", "users"),
    ("events", "Event", "/events", "calendar"),
    ("gallery", "Galeri", "/alumni/gallery", "image"),
    ("my_articles", "Artikel Saya", "/articles/my-articles", "file-text"),
    ("forum", "Forum Diskusi", "/forum", "message-square"),
    ("notifications", "Notifikasi", "/notifications", "bell"),
)


def build_navigation(role: str | None) -> List[NavItem]:
    menu = _ADMIN_MENU if normalize_role(role) == ADMIN else _ALUMNI_MENU
    return [NavItem(key=key, title=title, href=href, icon=icon) for key, title, href, icon in menu]
