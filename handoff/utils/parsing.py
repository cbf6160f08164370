from __future__ import annotations

from datetime import datetime, timezone

from handoff.core.errors import ParseError


def ensure_utc(value: datetime) -> datetime:
    """타임존 없는 시각을 UTC로 간주해 보정

    Args:
        value: 원본 시각

    Returns:
        UTC 기준 aware datetime
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str | datetime | None, field: str = "timestamp") -> datetime:
    """ISO8601 타임스탬프를 UTC datetime으로 파싱

    Args:
        value: 원본 타임스탬프 값
        field: 에러 메시지에 사용할 필드명

    Returns:
        UTC 기준 aware datetime

    Raises:
        ParseError: 파싱 실패 시
    """
    if value is None:
        raise ParseError(field, "값이 필요함")
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(field, f"지원하지 않는 타임스탬프 형식: {value}") from exc
    return ensure_utc(parsed)


def format_timestamp(value: datetime) -> str:
    """datetime을 UTC ISO8601 문자열로 변환

    Args:
        value: 변환할 시각

    Returns:
        Z 접미사를 가진 ISO8601 문자열
    """
    return ensure_utc(value).isoformat().replace("+00:00", "Z")
