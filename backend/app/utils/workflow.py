"""리소스 상태값(enum)과 서버 측 상태 전이 테이블입니다.

행사 신청, 갤러리 승인, 포럼 신고는 모두 문자열 상태 컬럼을 사용하지만
허용되는 값과 전이는 여기에서만 정의합니다. 서비스 레이어는 상태를 바꾸기 전에
``ensure_transition`` 으로 검증합니다.
"""

from enum import Enum
from typing import Dict, FrozenSet, Mapping, TypeVar

from fastapi import HTTPException


class RegistrationStatus(str, Enum):
    REGISTERED = "registered"
    ATTENDED = "attended"
    CANCELLED = "cancelled"


class GalleryType(str, Enum):
    PERSONAL = "personal"
    PUBLIC = "public"


class GalleryStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class ReportReason(str, Enum):
    SPAM = "spam"
    INAPPROPRIATE = "inappropriate"
    OFFENSIVE = "offensive"
    HARASSMENT = "harassment"
    OTHER = "other"


class ReportTarget(str, Enum):
    DISCUSSION = "discussion"
    REPLY = "reply"


E = TypeVar("E", bound=Enum)


REGISTRATION_TRANSITIONS: Dict[RegistrationStatus, FrozenSet[RegistrationStatus]] = {
    RegistrationStatus.REGISTERED: frozenset({RegistrationStatus.ATTENDED, RegistrationStatus.CANCELLED}),
    # 출석 처리 정정
    RegistrationStatus.ATTENDED: frozenset({RegistrationStatus.REGISTERED}),
    # 재신청(정원 재확인 필요)
    RegistrationStatus.CANCELLED: frozenset({RegistrationStatus.REGISTERED}),
}

GALLERY_TRANSITIONS: Dict[GalleryStatus, FrozenSet[GalleryStatus]] = {
    GalleryStatus.PENDING: frozenset({GalleryStatus.APPROVED, GalleryStatus.REJECTED}),
    GalleryStatus.APPROVED: frozenset({GalleryStatus.REJECTED, GalleryStatus.PENDING}),
    GalleryStatus.REJECTED: frozenset({GalleryStatus.APPROVED, GalleryStatus.PENDING}),
}

REPORT_TRANSITIONS: Dict[ReportStatus, FrozenSet[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.REVIEWED, ReportStatus.RESOLVED, ReportStatus.REJECTED}),
    ReportStatus.REVIEWED: frozenset({ReportStatus.RESOLVED, ReportStatus.REJECTED}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.REJECTED: frozenset(),
}


def can_transition(table: Mapping[E, FrozenSet[E]], current: E, target: E) -> bool:
    return target in table.get(current, frozenset())


def ensure_transition(table: Mapping[E, FrozenSet[E]], current: E, target: E) -> None:
    if not can_transition(table, current, target):
        raise HTTPException(
            status_code=400,
            detail=f"Status tidak dapat diubah dari '{current.value}' ke '{target.value}'.",
        )
