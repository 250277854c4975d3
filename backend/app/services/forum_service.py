"""Forum Service 도메인 서비스 레이어입니다. 카테고리, 토론, 댓글, 좋아요 흐름을 캡슐화합니다."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.forum import (
    ForumCategory, ForumDiscussion, ForumReply, ForumLike, ForumView,
)
from app.models.user import User
from app.schemas.forum import (
    ForumCategoryCreate, ForumCategoryUpdate,
    DiscussionCreate, DiscussionUpdate,
    ReplyCreate, ReplyUpdate,
)
from app.services import notification_service
from app.utils.helpers import excerpt_from, unique_slug
from app.utils.permissions import can_manage, ensure_admin, ensure_can_manage, is_admin
from app.utils.workflow import ReportTarget

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("recent", "popular", "oldest")


# ---- categories --------------------------------------------------------


def _get_category(db: Session, category_id: int) -> ForumCategory:
    category = db.query(ForumCategory).filter(ForumCategory.category_id == int(category_id)).first()
    if not category:
        raise HTTPException(status_code=404, detail="Kategori forum tidak ditemukan.")
    return category


def _category_slug_exists(db: Session, exclude_id: int | None = None):
    def exists(slug: str) -> bool:
        q = db.query(ForumCategory.category_id).filter(ForumCategory.slug == slug)
        if exclude_id is not None:
            q = q.filter(ForumCategory.category_id != exclude_id)
        return q.first() is not None
    return exists


def list_categories(db: Session, include_inactive: bool = False) -> List[ForumCategory]:
    q = db.query(ForumCategory)
    if not include_inactive:
        q = q.filter(ForumCategory.is_active == True)  # noqa: E712
    rows = q.order_by(ForumCategory.display_order.asc(), ForumCategory.name.asc()).all()
    counts = dict(
        db.query(ForumDiscussion.category_id, func.count(ForumDiscussion.discussion_id))
        .filter(ForumDiscussion.deleted_at.is_(None))
        .group_by(ForumDiscussion.category_id)
        .all()
    )
    for row in rows:
        setattr(row, "discussions_count", int(counts.get(row.category_id, 0)))
    return rows


def create_category(db: Session, data: ForumCategoryCreate, current_user: User) -> ForumCategory:
    ensure_admin(current_user)
    category = ForumCategory(**data.model_dump(), slug=unique_slug(data.name, _category_slug_exists(db)))
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: ForumCategoryUpdate, current_user: User) -> ForumCategory:
    ensure_admin(current_user)
    category = _get_category(db, category_id)
    payload = data.model_dump(exclude_unset=True)
    if payload.get("name") and payload["name"] != category.name:
        category.slug = unique_slug(payload["name"], _category_slug_exists(db, category.category_id))
    for k, v in payload.items():
        setattr(category, k, v)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int, current_user: User):
    ensure_admin(current_user)
    category = _get_category(db, category_id)
    in_use = (
        db.query(ForumDiscussion.discussion_id)
        .filter(ForumDiscussion.category_id == category.category_id)
        .first()
    )
    if in_use:
        raise HTTPException(status_code=400, detail="Kategori masih memiliki diskusi dan tidak dapat dihapus.")
    db.delete(category)
    db.commit()


# ---- discussions -------------------------------------------------------


def get_discussion(db: Session, discussion_id: int) -> ForumDiscussion:
    discussion = (
        db.query(ForumDiscussion)
        .filter(
            ForumDiscussion.discussion_id == int(discussion_id),
            ForumDiscussion.deleted_at.is_(None),
        )
        .first()
    )
    if not discussion:
        raise HTTPException(status_code=404, detail="Diskusi tidak ditemukan.")
    return discussion


def get_reply(db: Session, reply_id: int) -> ForumReply:
    reply = (
        db.query(ForumReply)
        .join(ForumDiscussion, ForumDiscussion.discussion_id == ForumReply.discussion_id)
        .filter(
            ForumReply.reply_id == int(reply_id),
            ForumReply.deleted_at.is_(None),
            ForumDiscussion.deleted_at.is_(None),
        )
        .first()
    )
    if not reply:
        raise HTTPException(status_code=404, detail="Balasan tidak ditemukan.")
    return reply


def _liked_ids(db: Session, user_id: int, target_type: ReportTarget, ids: list[int]) -> set[int]:
    if not ids:
        return set()
    rows = (
        db.query(ForumLike.target_id)
        .filter(
            ForumLike.user_id == int(user_id),
            ForumLike.target_type == target_type.value,
            ForumLike.target_id.in_(ids),
        )
        .all()
    )
    return {int(row[0]) for row in rows}


def _serialize_discussion(discussion: ForumDiscussion, liked: bool = False) -> ForumDiscussion:
    setattr(discussion, "category_name", discussion.category.name if discussion.category is not None else None)
    setattr(discussion, "user_liked", bool(liked))
    return discussion


def _serialize_reply(reply: ForumReply, liked: bool = False) -> ForumReply:
    setattr(reply, "user_liked", bool(liked))
    return reply


def _discussion_query(db: Session, search: Optional[str], category_id: Optional[int]):
    q = db.query(ForumDiscussion).filter(ForumDiscussion.deleted_at.is_(None))
    if category_id:
        q = q.filter(ForumDiscussion.category_id == int(category_id))
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(ForumDiscussion.title.ilike(like), ForumDiscussion.content.ilike(like)))
    return q


def _sort(q, sort: str):
    if sort == "popular":
        return q.order_by(
            ForumDiscussion.views_count.desc(),
            ForumDiscussion.likes_count.desc(),
            ForumDiscussion.discussion_id.desc(),
        )
    if sort == "oldest":
        return q.order_by(ForumDiscussion.created_at.asc(), ForumDiscussion.discussion_id.asc())
    return q.order_by(ForumDiscussion.last_activity_at.desc(), ForumDiscussion.discussion_id.desc())


def list_discussions(
    db: Session,
    current_user: User,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    sort: str = "recent",
    skip: int = 0,
    limit: int = 12,
) -> dict:
    if sort not in SORT_OPTIONS:
        sort = "recent"
    base = _discussion_query(db, search, category_id)
    # 고정글은 페이지와 무관하게 항상 먼저 보여준다.
    pinned = _sort(base.filter(ForumDiscussion.is_pinned == True), "recent").all()  # noqa: E712
    rows = (
        _sort(base.filter(ForumDiscussion.is_pinned == False), sort)  # noqa: E712
        .offset(skip)
        .limit(limit)
        .all()
    )
    liked = _liked_ids(
        db, current_user.user_id, ReportTarget.DISCUSSION,
        [int(d.discussion_id) for d in pinned + rows],
    )
    return {
        "pinned": [_serialize_discussion(d, int(d.discussion_id) in liked) for d in pinned],
        "discussions": [_serialize_discussion(d, int(d.discussion_id) in liked) for d in rows],
    }


def record_view(db: Session, discussion_id: int, user_id: int):
    exists = (
        db.query(ForumView.view_id)
        .filter(ForumView.discussion_id == discussion_id, ForumView.user_id == user_id)
        .first()
    )
    if exists:
        return
    db.add(ForumView(discussion_id=discussion_id, user_id=user_id))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        return
    db.query(ForumDiscussion).filter(ForumDiscussion.discussion_id == discussion_id).update(
        {"views_count": ForumDiscussion.views_count + 1}, synchronize_session=False
    )
    db.commit()


def get_discussion_detail(db: Session, discussion_id: int, current_user: User) -> dict:
    discussion = get_discussion(db, discussion_id)
    record_view(db, discussion.discussion_id, current_user.user_id)
    db.refresh(discussion)
    replies = (
        db.query(ForumReply)
        .filter(ForumReply.discussion_id == discussion.discussion_id, ForumReply.deleted_at.is_(None))
        .order_by(ForumReply.created_at.asc(), ForumReply.reply_id.asc())
        .all()
    )
    liked_discussion = _liked_ids(db, current_user.user_id, ReportTarget.DISCUSSION, [int(discussion.discussion_id)])
    liked_replies = _liked_ids(db, current_user.user_id, ReportTarget.REPLY, [int(r.reply_id) for r in replies])
    manageable = can_manage(current_user, discussion.user_id)
    return {
        "discussion": _serialize_discussion(discussion, bool(liked_discussion)),
        "replies": [_serialize_reply(r, int(r.reply_id) in liked_replies) for r in replies],
        "can_edit": manageable,
        "can_delete": manageable,
        "is_admin": is_admin(current_user),
    }


def _discussion_slug_exists(db: Session):
    def exists(slug: str) -> bool:
        return db.query(ForumDiscussion.discussion_id).filter(ForumDiscussion.slug == slug).first() is not None
    return exists


def _ensure_active_category(db: Session, category_id: int) -> ForumCategory:
    category = _get_category(db, category_id)
    if not category.is_active:
        raise HTTPException(status_code=400, detail="Kategori forum tidak aktif.")
    return category


def create_discussion(db: Session, data: DiscussionCreate, current_user: User) -> ForumDiscussion:
    _ensure_active_category(db, data.category_id)
    discussion = ForumDiscussion(
        user_id=current_user.user_id,
        category_id=data.category_id,
        title=data.title,
        slug=unique_slug(data.title, _discussion_slug_exists(db)),
        content=data.content,
        last_activity_at=datetime.now(),
    )
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    logger.info("[forum] discussion created discussion_id=%s by=%s", discussion.discussion_id, current_user.user_id)
    return _serialize_discussion(discussion)


def update_discussion(db: Session, discussion_id: int, data: DiscussionUpdate, current_user: User) -> ForumDiscussion:
    discussion = get_discussion(db, discussion_id)
    ensure_can_manage(current_user, discussion.user_id)
    payload = data.model_dump(exclude_unset=True)
    if payload.get("category_id") is not None and payload["category_id"] != discussion.category_id:
        _ensure_active_category(db, payload["category_id"])
    for k, v in payload.items():
        if v is not None:
            setattr(discussion, k, v)
    db.commit()
    db.refresh(discussion)
    return _serialize_discussion(discussion)


def soft_delete_discussion(db: Session, discussion: ForumDiscussion):
    discussion.deleted_at = datetime.now()


def delete_discussion(db: Session, discussion_id: int, current_user: User):
    discussion = get_discussion(db, discussion_id)
    ensure_can_manage(current_user, discussion.user_id)
    soft_delete_discussion(db, discussion)
    db.commit()
    logger.info("[forum] discussion deleted discussion_id=%s by=%s", discussion_id, current_user.user_id)


def toggle_pin(db: Session, discussion_id: int, current_user: User) -> ForumDiscussion:
    ensure_admin(current_user)
    discussion = get_discussion(db, discussion_id)
    discussion.is_pinned = not bool(discussion.is_pinned)
    db.commit()
    db.refresh(discussion)
    logger.info("[forum] discussion_id=%s pinned=%s", discussion.discussion_id, discussion.is_pinned)
    return _serialize_discussion(discussion)


def toggle_lock(db: Session, discussion_id: int, current_user: User) -> ForumDiscussion:
    ensure_admin(current_user)
    discussion = get_discussion(db, discussion_id)
    discussion.is_locked = not bool(discussion.is_locked)
    db.commit()
    db.refresh(discussion)
    logger.info("[forum] discussion_id=%s locked=%s", discussion.discussion_id, discussion.is_locked)
    return _serialize_discussion(discussion)


# ---- replies -----------------------------------------------------------


def _sync_replies_count(db: Session, discussion_id: int):
    total = (
        db.query(func.count(ForumReply.reply_id))
        .filter(ForumReply.discussion_id == discussion_id, ForumReply.deleted_at.is_(None))
        .scalar()
    )
    db.query(ForumDiscussion).filter(ForumDiscussion.discussion_id == discussion_id).update(
        {"replies_count": int(total or 0)}, synchronize_session=False
    )


def _notify_reply(db: Session, discussion: ForumDiscussion, reply: ForumReply, actor: User):
    link_url = f"/forum/discussions/{discussion.discussion_id}#reply-{reply.reply_id}"
    snippet = excerpt_from(reply.content, 100)
    notified = {int(actor.user_id)}
    if reply.parent is not None and int(reply.parent.user_id) not in notified:
        notification_service.create_notification(
            db,
            user_id=int(reply.parent.user_id),
            noti_type="forum_reply_reply",
            title="Balasan baru pada komentar Anda",
            message=f"{actor.name} membalas komentar Anda: {snippet}",
            link_url=link_url,
            commit=False,
        )
        notified.add(int(reply.parent.user_id))
    if int(discussion.user_id) not in notified:
        notification_service.create_notification(
            db,
            user_id=int(discussion.user_id),
            noti_type="forum_reply",
            title="Balasan baru pada diskusi Anda",
            message=f"{actor.name} membalas diskusi \"{discussion.title}\": {snippet}",
            link_url=link_url,
            commit=False,
        )


def create_reply(db: Session, discussion_id: int, data: ReplyCreate, current_user: User) -> ForumReply:
    discussion = get_discussion(db, discussion_id)
    if discussion.is_locked:
        raise HTTPException(status_code=400, detail="Diskusi ini telah dikunci dan tidak dapat dibalas.")
    if data.parent_id is not None:
        parent = get_reply(db, data.parent_id)
        if parent.discussion_id != discussion.discussion_id:
            raise HTTPException(status_code=400, detail="Balasan induk tidak berada pada diskusi ini.")

    reply = ForumReply(
        discussion_id=discussion.discussion_id,
        user_id=current_user.user_id,
        parent_id=data.parent_id,
        content=data.content,
    )
    db.add(reply)
    db.flush()
    _sync_replies_count(db, discussion.discussion_id)
    discussion.last_activity_at = datetime.now()
    _notify_reply(db, discussion, reply, current_user)
    db.commit()
    db.refresh(reply)
    logger.info(
        "[forum] reply created reply_id=%s discussion_id=%s by=%s",
        reply.reply_id, discussion.discussion_id, current_user.user_id,
    )
    return _serialize_reply(reply)


def update_reply(db: Session, reply_id: int, data: ReplyUpdate, current_user: User) -> ForumReply:
    reply = get_reply(db, reply_id)
    ensure_can_manage(current_user, reply.user_id)
    reply.content = data.content
    db.commit()
    db.refresh(reply)
    return _serialize_reply(reply)


def soft_delete_reply(db: Session, reply: ForumReply):
    reply.deleted_at = datetime.now()
    db.flush()
    _sync_replies_count(db, reply.discussion_id)


def delete_reply(db: Session, reply_id: int, current_user: User):
    reply = get_reply(db, reply_id)
    ensure_can_manage(current_user, reply.user_id)
    soft_delete_reply(db, reply)
    db.commit()


# ---- likes -------------------------------------------------------------


def _like_target(db: Session, target_type: ReportTarget, target_id: int):
    if target_type == ReportTarget.DISCUSSION:
        return get_discussion(db, target_id)
    return get_reply(db, target_id)


def toggle_like(db: Session, target_type: ReportTarget, target_id: int, current_user: User) -> dict:
    target = _like_target(db, target_type, target_id)
    existing = (
        db.query(ForumLike)
        .filter(
            ForumLike.user_id == current_user.user_id,
            ForumLike.target_type == target_type.value,
            ForumLike.target_id == int(target_id),
        )
        .first()
    )
    if existing:
        db.delete(existing)
        liked = False
    else:
        db.add(ForumLike(user_id=current_user.user_id, target_type=target_type.value, target_id=int(target_id)))
        liked = True
    try:
        db.flush()
    except IntegrityError:
        # 같은 사용자의 동시 요청은 이미 좋아요가 반영된 상태로 본다.
        db.rollback()
        target = _like_target(db, target_type, target_id)
        return {"liked": True, "likes_count": int(target.likes_count or 0)}

    total = (
        db.query(func.count(ForumLike.like_id))
        .filter(ForumLike.target_type == target_type.value, ForumLike.target_id == int(target_id))
        .scalar()
    )
    target.likes_count = int(total or 0)

    if liked and int(target.user_id) != int(current_user.user_id):
        if target_type == ReportTarget.DISCUSSION:
            link_url = f"/forum/discussions/{target.discussion_id}"
            message = f"{current_user.name} menyukai diskusi \"{target.title}\"."
        else:
            link_url = f"/forum/discussions/{target.discussion_id}#reply-{target.reply_id}"
            message = f"{current_user.name} menyukai balasan Anda."
        notification_service.create_notification(
            db,
            user_id=int(target.user_id),
            noti_type="forum_like",
            title="Seseorang menyukai tulisan Anda",
            message=message,
            link_url=link_url,
            commit=False,
        )
    db.commit()
    return {"liked": liked, "likes_count": int(total or 0)}
