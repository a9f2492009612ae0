import re
import uuid
from datetime import datetime, timezone
from typing import Optional

# 저장소 식별자: 24자리 16진수 문자열
OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    return uuid.uuid4().hex[:24]


def is_valid_object_id(value) -> bool:
    """Format-only check; never touches the store."""
    if not isinstance(value, str):
        return False
    return OBJECT_ID_PATTERN.fullmatch(value) is not None


def normalize_object_id(value: str) -> str:
    # 저장된 ID는 항상 소문자; 대소문자만 다른 ID는 같은 레코드
    return value.lower()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clean_text(value: Optional[str]) -> Optional[str]:
    # None은 "전달되지 않음"으로 취급
    if value is None:
        return None
    return value.strip()
