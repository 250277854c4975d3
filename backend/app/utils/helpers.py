import os
import re
import unicodedata
import uuid
from typing import Callable

from fastapi import UploadFile, HTTPException
from app.config import settings


def _extension(filename: str | None) -> str:
    name = filename or ""
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def validate_image(file: UploadFile) -> str:
    ext = _extension(file.filename)
    allowed = [e.lower() for e in settings.ALLOWED_IMAGE_EXTENSIONS]
    if ext not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(allowed)}",
        )
    return ext


async def save_image(file: UploadFile, subfolder: str) -> str:
    """이미지를 UPLOAD_DIR/subfolder 아래 저장하고 상대 경로를 반환합니다."""
    ext = validate_image(file)
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File kosong tidak dapat diunggah.")
    if len(content) > settings.MAX_IMAGE_UPLOAD_SIZE:
        limit_mb = settings.MAX_IMAGE_UPLOAD_SIZE // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File exceeds {limit_mb} MB limit")

    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)

    filename = f"{uuid.uuid4().hex}.{ext}"
    with open(os.path.join(folder, filename), "wb") as f:
        f.write(content)

    return f"{subfolder}/{filename}".replace("\\", "/")


def delete_stored_file(relative_path: str | None) -> bool:
    if not relative_path:
        return False
    path = os.path.join(settings.UPLOAD_DIR, relative_path)
    if os.path.isfile(path):
        os.remove(path)
        return True
    return False


def public_url(relative_path: str | None) -> str | None:
    if not relative_path:
        return None
    return f"/uploads/{relative_path}".replace("\\", "/")


def slugify(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "item"


def unique_slug(text: str, exists: Callable[[str], bool]) -> str:
    base = slugify(text)
    candidate = base
    counter = 1
    while exists(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate


def strip_tags(html: str | None) -> str:
    return re.sub(r"<[^>]+>", "", html or "").strip()


def excerpt_from(content: str | None, limit: int = 160) -> str:
    text = re.sub(r"\s+", " ", strip_tags(content))
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def clamp_limit(limit: int | None) -> int:
    if limit is None or limit <= 0:
        return settings.DEFAULT_PAGE_SIZE
    return min(int(limit), settings.MAX_PAGE_SIZE)
