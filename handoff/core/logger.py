from __future__ import annotations

import logging
from datetime import datetime, timezone

from handoff.core.telemetry import TelemetryStore


def log_event(
    event: str,
    level: str,
    patient_id: str,
    stage: str,
    message: str,
    error_code: str | None = None,
    category: str | None = None,
    entry_count: int | None = None,
) -> None:
    """이벤트를 표준 로깅과 DuckDB에 기록

    Args:
        event: 이벤트 이름
        level: 로깅 레벨 문자열
        patient_id: 환자 식별자
        stage: 처리 단계
        message: 로그 메시지
        error_code: 에러 코드(선택)
        category: 인계 항목 분류(선택)
        entry_count: 인계 항목 수(선택)
    """
    logger = logging.getLogger("shift-handoff")
    extra = {
        "event": event,
        "patient_id": patient_id,
        "stage": stage,
    }
    logger.log(getattr(logging, level.upper(), logging.INFO), message, extra=extra)

    TelemetryStore().insert_log(
        {
            "timestamp": datetime.now(timezone.utc).replace(tzinfo=None),
            "level": level.upper(),
            "event": event,
            "patient_id": patient_id,
            "stage": stage,
            "error_code": error_code,
            "message": message,
            "category": category,
            "entry_count": entry_count,
        }
    )
