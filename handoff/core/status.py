from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal
from zoneinfo import ZoneInfo

from handoff.models.patient import VitalsSnapshot
from handoff.utils.parsing import ensure_utc, parse_timestamp

VitalClass = Literal["low", "normal", "high"]
ShiftPeriod = Literal["day", "evening", "night"]

VITAL_RANGES: dict[str, tuple[float, float]] = {
    "temperature": (97, 99),
    "heart_rate": (60, 100),
    "systolic": (90, 140),
    "diastolic": (60, 90),
    "respiratory_rate": (12, 20),
    "oxygen_saturation": (95, 100),
}

_VITAL_ALIASES = {
    "heartRate": "heart_rate",
    "respiratoryRate": "respiratory_rate",
    "oxygenSaturation": "oxygen_saturation",
}


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return ensure_utc(now)


def _elapsed_minutes(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def time_until(
    timestamp: str | datetime | None, now: datetime | None = None
) -> str | None:
    """다음 일정까지 남은 시간 문자열

    Args:
        timestamp: 예정 시각
        now: 기준 시각(없으면 현재 시각)

    Returns:
        "Overdue", "{분}m", "{시}h {분}m" 또는 None
    """
    if timestamp is None:
        return None
    target = parse_timestamp(timestamp)
    diff_minutes = _elapsed_minutes(_now(now), target)
    if diff_minutes < 0:
        return "Overdue"
    if diff_minutes < 60:
        return f"{diff_minutes}m"
    hours, minutes = divmod(diff_minutes, 60)
    return f"{hours}h {minutes}m"


def time_ago(timestamp: str | datetime | None, now: datetime | None = None) -> str | None:
    """경과 시간 문자열

    미래 시각은 0분 전으로 취급한다.

    Args:
        timestamp: 과거 시각
        now: 기준 시각(없으면 현재 시각)

    Returns:
        "{시}h ago", "{분}m ago" 또는 None
    """
    if timestamp is None:
        return None
    diff_minutes = max(_elapsed_minutes(parse_timestamp(timestamp), _now(now)), 0)
    hours = diff_minutes // 60
    if hours > 0:
        return f"{hours}h ago"
    return f"{diff_minutes}m ago"


def classify_vital(name: str, value: float) -> VitalClass:
    """활력징후 값을 정상 범위와 비교

    범위가 정의되지 않은 항목은 "normal"로 처리한다.

    Args:
        name: 항목명(snake_case 또는 camelCase)
        value: 측정값

    Returns:
        "low", "high", "normal"
    """
    bounds = VITAL_RANGES.get(_VITAL_ALIASES.get(name, name))
    if bounds is None:
        return "normal"
    low, high = bounds
    if value < low:
        return "low"
    if value > high:
        return "high"
    return "normal"


def classify_snapshot(vitals: VitalsSnapshot) -> dict[str, VitalClass]:
    """측정값 전체를 분류

    Args:
        vitals: 활력징후 측정값

    Returns:
        항목별 분류 결과
    """
    return {name: classify_vital(name, getattr(vitals, name)) for name in VITAL_RANGES}


def shift_period(now: datetime) -> ShiftPeriod:
    """시각의 시(hour)로 근무조를 판정

    Args:
        now: 판정할 시각(벽시계 기준)

    Returns:
        "day"(7-19시), "evening"(19-23시), "night"
    """
    hour = now.hour
    if 7 <= hour < 19:
        return "day"
    if 19 <= hour < 23:
        return "evening"
    return "night"


def facility_now(tz_name: str = "", now: datetime | None = None) -> datetime:
    """기관 시간대 기준 현재 시각

    Args:
        tz_name: IANA 시간대 이름(비어 있으면 서버 로컬 시간)
        now: 기준 시각(없으면 현재 시각)

    Returns:
        시간대가 적용된 현재 시각
    """
    current = _now(now)
    if tz_name:
        return current.astimezone(ZoneInfo(tz_name))
    return current.astimezone()


def current_shift_period(tz_name: str = "", now: datetime | None = None) -> ShiftPeriod:
    """기관 시간대 기준 현재 근무조"""
    return shift_period(facility_now(tz_name, now))
