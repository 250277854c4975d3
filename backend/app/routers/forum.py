"""Forum 기능 API 라우터입니다. 카테고리, 토론, 댓글, 좋아요, 고정/잠금을 제공합니다."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user, require_admin
from app.models.user import User
from app.schemas.forum import (
    DiscussionCreate, DiscussionDetailOut, DiscussionListOut, DiscussionOut, DiscussionUpdate,
    ForumCategoryCreate, ForumCategoryOut, ForumCategoryUpdate,
    LikeToggleOut, ReplyCreate, ReplyOut, ReplyUpdate,
)
from app.services import forum_service
from app.utils.helpers import clamp_limit
from app.utils.workflow import ReportTarget

router = APIRouter(prefix="/api/forum", tags=["forum"])


@router.get("/categories", response_model=List[ForumCategoryOut])
def list_categories(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return forum_service.list_categories(db, include_inactive=include_inactive and current_user.role == "admin")


@router.post("/categories", response_model=ForumCategoryOut, status_code=201)
def create_category(data: ForumCategoryCreate, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return forum_service.create_category(db, data, current_user)


@router.put("/categories/{category_id}", response_model=ForumCategoryOut)
def update_category(
    category_id: int,
    data: ForumCategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return forum_service.update_category(db, category_id, data, current_user)


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(category_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    forum_service.delete_category(db, category_id, current_user)
    return Response(status_code=204)


@router.get("/discussions", response_model=DiscussionListOut)
def list_discussions(
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    sort: Literal["recent", "popular", "oldest"] = "recent",
    skip: int = 0,
    limit: int | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return forum_service.list_discussions(
        db,
        current_user,
        search=search,
        category_id=category_id,
        sort=sort,
        skip=max(skip, 0),
        limit=clamp_limit(limit),
    )


@router.post("/discussions", response_model=DiscussionOut, status_code=201)
def create_discussion(data: DiscussionCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return forum_service.create_discussion(db, data, current_user)


@router.get("/discussions/{discussion_id}", response_model=DiscussionDetailOut)
def get_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return forum_service.get_discussion_detail(db, discussion_id, current_user)


@router.put("/discussions/{discussion_id}", response_model=DiscussionOut)
def update_discussion(
    discussion_id: int,
    data: DiscussionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return forum_service.update_discussion(db, discussion_id, data, current_user)


@router.delete("/discussions/{discussion_id}", status_code=204)
def delete_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    forum_service.delete_discussion(db, discussion_id, current_user)
    return Response(status_code=204)


@router.post("/discussions/{discussion_id}/pin", response_model=DiscussionOut)
def toggle_pin(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return forum_service.toggle_pin(db, discussion_id, current_user)


@router.post("/discussions/{discussion_id}/lock", response_model=DiscussionOut)
def toggle_lock(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    return forum_service.toggle_lock(db, discussion_id, current_user)


@router.post("/discussions/{discussion_id}/like", response_model=LikeToggleOut)
def like_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return forum_service.toggle_like(db, ReportTarget.DISCUSSION, discussion_id, current_user)


@router.post("/discussions/{discussion_id}/replies", response_model=ReplyOut, status_code=201)
def create_reply(
    discussion_id: int,
    data: ReplyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return forum_service.create_reply(db, discussion_id, data, current_user)


@router.put("/replies/{reply_id}", response_model=ReplyOut)
def update_reply(
    reply_id: int,
    data: ReplyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return forum_service.update_reply(db, reply_id, data, current_user)


@router.delete("/replies/{reply_id}", status_code=204)
def delete_reply(reply_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    forum_service.delete_reply(db, reply_id, current_user)
    return Response(status_code=204)


@router.post("/replies/{reply_id}/like", response_model=LikeToggleOut)
def like_reply(reply_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return forum_service.toggle_like(db, ReportTarget.REPLY, reply_id, current_user)
