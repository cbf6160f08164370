from __future__ import annotations

from fastapi import APIRouter, Depends, status

from handoff.api.deps import get_service
from handoff.core.service import HandoffService
from handoff.core.shift import ShiftSummary
from handoff.models.handoff import EntryRequest, VoiceEntryRequest

router = APIRouter()


def _summary_payload(summary: ShiftSummary) -> dict:
    """교대 기록 직렬화"""
    next_prompt = summary.next_prompt()
    return {
        **summary.snapshot().model_dump(mode="json"),
        "completed_count": summary.completed_count,
        "is_ready": summary.is_ready,
        "next_prompt": next_prompt.model_dump(mode="json") if next_prompt else None,
    }


@router.get("/handoff/{patient_id}")
def get_handoff(patient_id: str, service: HandoffService = Depends(get_service)) -> dict:
    """현재 교대 인계 요약 조회"""
    return _summary_payload(service.summary(patient_id))


@router.post("/handoff/{patient_id}/entries", status_code=status.HTTP_201_CREATED)
def add_entry(
    patient_id: str,
    payload: EntryRequest,
    service: HandoffService = Depends(get_service),
) -> dict:
    """인계 항목 기록

    Args:
        patient_id: 환자 식별자
        payload: 기록 요청
        service: 인계 서비스

    Returns:
        생성된 항목과 갱신된 완료 상태
    """
    entry = service.record_entry(patient_id, payload)
    summary = service.summary(patient_id)
    return {
        "entry": entry.model_dump(mode="json"),
        "completion_status": summary.completion.model_dump(),
    }


@router.post("/handoff/{patient_id}/voice", status_code=status.HTTP_201_CREATED)
def add_voice_entry(
    patient_id: str,
    payload: VoiceEntryRequest,
    service: HandoffService = Depends(get_service),
) -> dict:
    """음성 인식 결과로 인계 항목 기록(확정 결과만 사용)"""
    entry = service.record_voice_entry(patient_id, payload)
    summary = service.summary(patient_id)
    return {
        "entry": entry.model_dump(mode="json"),
        "completion_status": summary.completion.model_dump(),
    }


@router.post("/handoff/{patient_id}/complete")
def complete_handoff(
    patient_id: str, service: HandoffService = Depends(get_service)
) -> dict:
    """인계 완료"""
    return _summary_payload(service.complete_handoff(patient_id))
