"""Gallery Service 도메인 서비스 레이어입니다. 사진 등록과 관리자 승인 흐름을 캡슐화합니다.

- personal 항목은 승인 없이 바로 approved 상태가 됩니다.
- public 항목은 pending 으로 시작하고 관리자가 approve/reject 합니다.
- 반려된 public 항목을 수정하거나 personal 을 public 으로 바꾸면 다시 pending 으로 돌아갑니다.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.gallery import Gallery
from app.models.user import User
from app.services import notification_service
from app.utils.helpers import public_url, save_image, delete_stored_file
from app.utils.permissions import ensure_admin, ensure_can_manage, can_manage
from app.utils.workflow import (
    GALLERY_TRANSITIONS,
    GalleryStatus,
    GalleryType,
    ensure_transition,
)

logger = logging.getLogger(__name__)

PENDING = GalleryStatus.PENDING.value
APPROVED = GalleryStatus.APPROVED.value
REJECTED = GalleryStatus.REJECTED.value
PUBLIC = GalleryType.PUBLIC.value
PERSONAL = GalleryType.PERSONAL.value


def _serialize(item: Gallery) -> Gallery:
    setattr(item, "image_url", public_url(item.image_path))
    setattr(item, "approver_name", item.approver.name if item.approver is not None else None)
    return item


def _get_item(db: Session, gallery_id: int, include_deleted: bool = False) -> Gallery:
    q = db.query(Gallery).filter(Gallery.gallery_id == int(gallery_id))
    if not include_deleted:
        q = q.filter(Gallery.deleted_at.is_(None))
    item = q.first()
    if not item:
        raise HTTPException(status_code=404, detail="Foto tidak ditemukan.")
    return item


def _is_publicly_visible(item: Gallery) -> bool:
    return item.type == PUBLIC and item.status == APPROVED and item.deleted_at is None


def _apply_filters(q, type: Optional[str], status: Optional[str], batch: Optional[str], search: Optional[str]):
    if type:
        q = q.filter(Gallery.type == GalleryType(type).value)
    if status:
        q = q.filter(Gallery.status == GalleryStatus(status).value)
    if batch:
        q = q.filter(Gallery.batch == batch)
    if search and search.strip():
        like = f"%{search.strip()}%"
        q = q.filter(or_(Gallery.title.ilike(like), Gallery.description.ilike(like)))
    return q


def _initial_state(item: Gallery):
    if item.type == PUBLIC:
        item.status = PENDING
        item.approved_by = None
        item.approved_at = None
    else:
        item.status = APPROVED
    item.rejection_reason = None


def _notify_admins_pending(db: Session, item: Gallery, actor: User):
    notification_service.notify_admins(
        db,
        noti_type="gallery_pending",
        title="Foto menunggu persetujuan",
        message=f"{actor.name} mengunggah foto \"{item.title}\" ke galeri publik.",
        link_url=f"/admin/gallery/{item.gallery_id}",
        exclude_user_id=actor.user_id,
    )


def list_mine(
    db: Session,
    current_user: User,
    type: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[Gallery]:
    q = db.query(Gallery).filter(
        Gallery.user_id == current_user.user_id,
        Gallery.deleted_at.is_(None),
    )
    q = _apply_filters(q, type, status, None, search)
    rows = q.order_by(Gallery.created_at.desc(), Gallery.gallery_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(row) for row in rows]


async def create_item(
    db: Session,
    current_user: User,
    file: UploadFile,
    title: str,
    type: GalleryType,
    description: Optional[str] = None,
    batch: Optional[str] = None,
) -> Gallery:
    if not (title or "").strip():
        raise HTTPException(status_code=400, detail="Judul foto wajib diisi.")
    image_path = await save_image(file, subfolder="gallery")
    item = Gallery(
        user_id=current_user.user_id,
        title=title.strip(),
        description=description,
        image_path=image_path,
        batch=batch or current_user.angkatan,
        type=GalleryType(type).value,
        views_count=0,
    )
    _initial_state(item)
    db.add(item)
    db.commit()
    db.refresh(item)
    if item.type == PUBLIC:
        _notify_admins_pending(db, item, current_user)
    logger.info(
        "[gallery] submitted gallery_id=%s type=%s status=%s by=%s",
        item.gallery_id, item.type, item.status, current_user.user_id,
    )
    return _serialize(item)


def get_item(db: Session, gallery_id: int, current_user: User) -> Gallery:
    item = _get_item(db, gallery_id)
    if not can_manage(current_user, item.user_id) and not _is_publicly_visible(item):
        raise HTTPException(status_code=403, detail="Anda tidak memiliki akses ke foto ini.")
    return _serialize(item)


async def update_item(
    db: Session,
    gallery_id: int,
    current_user: User,
    title: Optional[str] = None,
    description: Optional[str] = None,
    type: Optional[GalleryType] = None,
    batch: Optional[str] = None,
    file: Optional[UploadFile] = None,
) -> Gallery:
    item = _get_item(db, gallery_id)
    if item.user_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="Hanya pemilik yang dapat mengubah foto ini.")

    previous_type = item.type
    previous_status = item.status
    if title is not None:
        if not title.strip():
            raise HTTPException(status_code=400, detail="Judul foto wajib diisi.")
        item.title = title.strip()
    if description is not None:
        item.description = description
    if batch is not None:
        item.batch = batch or None
    if type is not None:
        item.type = GalleryType(type).value

    old_path = None
    if file is not None and file.filename:
        old_path = item.image_path
        item.image_path = await save_image(file, subfolder="gallery")

    resubmitted = False
    if item.type == PERSONAL and previous_type != PERSONAL:
        _initial_state(item)
    elif item.type == PUBLIC and (previous_type != PUBLIC or previous_status == REJECTED):
        _initial_state(item)
        resubmitted = True

    db.commit()
    db.refresh(item)
    delete_stored_file(old_path)
    if resubmitted:
        _notify_admins_pending(db, item, current_user)
        logger.info("[gallery] resubmitted gallery_id=%s from=%s", item.gallery_id, previous_status)
    return _serialize(item)


def delete_item(db: Session, gallery_id: int, current_user: User):
    item = _get_item(db, gallery_id)
    ensure_can_manage(current_user, item.user_id)
    item.deleted_at = datetime.now()
    db.commit()
    logger.info("[gallery] soft-deleted gallery_id=%s by=%s", gallery_id, current_user.user_id)


# ---- public ------------------------------------------------------------


def _public_query(db: Session):
    return db.query(Gallery).filter(
        Gallery.type == PUBLIC,
        Gallery.status == APPROVED,
        Gallery.deleted_at.is_(None),
    )


def list_public(
    db: Session,
    batch: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 12,
) -> List[Gallery]:
    q = _apply_filters(_public_query(db), None, None, batch, search)
    rows = q.order_by(Gallery.approved_at.desc(), Gallery.gallery_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(row) for row in rows]


def list_public_batches(db: Session) -> list[dict]:
    rows = (
        _public_query(db)
        .filter(Gallery.batch.isnot(None))
        .with_entities(Gallery.batch, func.count(Gallery.gallery_id))
        .group_by(Gallery.batch)
        .order_by(Gallery.batch.desc())
        .all()
    )
    return [{"batch": batch, "total": int(total)} for batch, total in rows]


def view_public(db: Session, gallery_id: int) -> Gallery:
    item = _get_item(db, gallery_id)
    if not _is_publicly_visible(item):
        raise HTTPException(status_code=404, detail="Foto tidak ditemukan.")
    db.query(Gallery).filter(Gallery.gallery_id == item.gallery_id).update(
        {"views_count": Gallery.views_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(item)
    return _serialize(item)


# ---- admin -------------------------------------------------------------


def admin_list(
    db: Session,
    current_user: User,
    status: Optional[str] = None,
    type: Optional[str] = None,
    batch: Optional[str] = None,
    search: Optional[str] = None,
    include_deleted: bool = False,
    skip: int = 0,
    limit: int = 12,
) -> List[Gallery]:
    ensure_admin(current_user)
    q = db.query(Gallery)
    if not include_deleted:
        q = q.filter(Gallery.deleted_at.is_(None))
    q = _apply_filters(q, type, status, batch, search)
    rows = q.order_by(Gallery.created_at.desc(), Gallery.gallery_id.desc()).offset(skip).limit(limit).all()
    return [_serialize(row) for row in rows]


def statistics(db: Session) -> dict:
    base = db.query(Gallery).filter(Gallery.deleted_at.is_(None))
    by_batch = (
        base.filter(Gallery.batch.isnot(None))
        .with_entities(Gallery.batch, func.count(Gallery.gallery_id))
        .group_by(Gallery.batch)
        .order_by(func.count(Gallery.gallery_id).desc(), Gallery.batch.desc())
        .limit(5)
        .all()
    )
    return {
        "total": base.count(),
        "pending": base.filter(Gallery.status == PENDING).count(),
        "approved": base.filter(Gallery.status == APPROVED).count(),
        "rejected": base.filter(Gallery.status == REJECTED).count(),
        "public": base.filter(Gallery.type == PUBLIC).count(),
        "personal": base.filter(Gallery.type == PERSONAL).count(),
        "by_batch": [{"batch": batch, "total": int(total)} for batch, total in by_batch],
    }


def approve(db: Session, gallery_id: int, current_user: User) -> Gallery:
    ensure_admin(current_user)
    item = _get_item(db, gallery_id)
    if item.type != PUBLIC:
        raise HTTPException(status_code=400, detail="Hanya foto galeri publik yang perlu dimoderasi.")
    ensure_transition(GALLERY_TRANSITIONS, GalleryStatus(item.status), GalleryStatus.APPROVED)
    item.status = APPROVED
    item.approved_by = current_user.user_id
    item.approved_at = datetime.now()
    item.rejection_reason = None
    notification_service.create_notification(
        db,
        user_id=item.user_id,
        noti_type="gallery_approved",
        title="Foto disetujui",
        message=f"Foto \"{item.title}\" telah disetujui dan tampil di galeri publik.",
        link_url=f"/gallery/{item.gallery_id}",
        commit=False,
    )
    db.commit()
    db.refresh(item)
    logger.info("[gallery] approved gallery_id=%s by=%s", item.gallery_id, current_user.user_id)
    return _serialize(item)


def reject(db: Session, gallery_id: int, reason: Optional[str], current_user: User) -> Gallery:
    ensure_admin(current_user)
    reason = (reason or "").strip()
    if not reason:
        raise HTTPException(status_code=400, detail="Alasan penolakan wajib diisi.")
    item = _get_item(db, gallery_id)
    if item.type != PUBLIC:
        raise HTTPException(status_code=400, detail="Hanya foto galeri publik yang perlu dimoderasi.")
    ensure_transition(GALLERY_TRANSITIONS, GalleryStatus(item.status), GalleryStatus.REJECTED)
    item.status = REJECTED
    item.rejection_reason = reason
    item.approved_by = None
    item.approved_at = None
    notification_service.create_notification(
        db,
        user_id=item.user_id,
        noti_type="gallery_rejected",
        title="Foto ditolak",
        message=f"Foto \"{item.title}\" ditolak. Alasan: {reason}",
        link_url=f"/gallery/{item.gallery_id}",
        commit=False,
    )
    db.commit()
    db.refresh(item)
    logger.info("[gallery] rejected gallery_id=%s by=%s", item.gallery_id, current_user.user_id)
    return _serialize(item)


def moderate(db: Session, gallery_id: int, action: str, reason: Optional[str], current_user: User) -> Gallery:
    if action == "approve":
        return approve(db, gallery_id, current_user)
    return reject(db, gallery_id, reason, current_user)


def admin_delete(db: Session, gallery_id: int, current_user: User):
    ensure_admin(current_user)
    delete_item(db, gallery_id, current_user)


def restore(db: Session, gallery_id: int, current_user: User) -> Gallery:
    ensure_admin(current_user)
    item = _get_item(db, gallery_id, include_deleted=True)
    if item.deleted_at is None:
        raise HTTPException(status_code=400, detail="Foto tidak dalam keadaan terhapus.")
    item.deleted_at = None
    db.commit()
    db.refresh(item)
    logger.info("[gallery] restored gallery_id=%s by=%s", item.gallery_id, current_user.user_id)
    return _serialize(item)


def purge_deleted(db: Session, older_than_days: int = 30) -> int:
    """soft delete 후 일정 기간이 지난 항목과 파일을 영구 삭제합니다."""
    cutoff = datetime.now() - timedelta(days=older_than_days)
    rows = db.query(Gallery).filter(Gallery.deleted_at.isnot(None), Gallery.deleted_at < cutoff).all()
    paths = [row.image_path for row in rows]
    for row in rows:
        db.delete(row)
    db.commit()
    for path in paths:
        delete_stored_file(path)
    logger.info("[gallery] purged %s soft-deleted items older than %s days", len(rows), older_than_days)
    return len(rows)
