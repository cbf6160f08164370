from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from handoff.api.deps import get_service
from handoff.core.ranking import (
    FilterBy,
    SortBy,
    alerts_count,
    critical_count,
    filter_patients,
    sort_patients,
)
from handoff.core.service import HandoffService
from handoff.core.status import classify_snapshot, time_ago, time_until
from handoff.models.patient import NewPatient, NoteRequest, Patient

router = APIRouter()


def _list_item(patient: Patient, now: datetime) -> dict:
    """목록 항목 직렬화

    Args:
        patient: 환자
        now: 기준 시각

    Returns:
        파생 값이 포함된 환자 딕셔너리
    """
    item = patient.model_dump(mode="json")
    item["next_med_in"] = time_until(patient.next_med_time, now)
    item["last_vitals_ago"] = time_ago(patient.last_vitals_time, now)
    return item


@router.get("/patients")
def list_patients(
    search: str = "",
    sort_by: SortBy = "priority",
    filter_by: FilterBy = "all",
    service: HandoffService = Depends(get_service),
) -> dict:
    """환자 목록 조회

    Args:
        search: 이름/병실/진단 검색어
        sort_by: 정렬 기준
        filter_by: 필터 구분
        service: 인계 서비스

    Returns:
        정렬된 환자 목록과 집계
    """
    now = datetime.now(timezone.utc)
    patients = service.patients.all_patients()
    statuses = service.patients.statuses
    selected = sort_patients(filter_patients(patients, statuses, search, filter_by), sort_by)
    return {
        "patients": [_list_item(patient, now) for patient in selected],
        "total": len(selected),
        "critical_count": critical_count(patients),
        "alerts_count": alerts_count(patients, statuses),
    }


@router.post("/patients", status_code=status.HTTP_201_CREATED)
def add_patient(
    payload: NewPatient, service: HandoffService = Depends(get_service)
) -> dict:
    """환자 추가"""
    patient = service.add_patient(payload)
    return patient.model_dump(mode="json")


@router.get("/patients/{patient_id}")
def patient_detail(patient_id: str, service: HandoffService = Depends(get_service)) -> dict:
    """환자 상세 조회

    Args:
        patient_id: 환자 식별자
        service: 인계 서비스

    Returns:
        상태, 활력징후 분류, 투약 정보, 활동 기록이 포함된 상세 정보
    """
    now = datetime.now(timezone.utc)
    patient = service.patients.get(patient_id)
    patient_status = service.patients.status(patient_id)
    vitals = service.patients.vitals(patient_id)
    detail = _list_item(patient, now)
    detail["status"] = patient_status.model_dump(mode="json") if patient_status else None
    detail["vitals"] = None
    if vitals is not None:
        detail["vitals"] = {
            **vitals.model_dump(mode="json"),
            "classification": classify_snapshot(vitals),
            "taken_ago": time_ago(vitals.timestamp, now),
        }
    detail["medications"] = [
        medication.model_dump(mode="json")
        for medication in service.patients.medications(patient_id)
    ]
    detail["activity_log"] = [
        log.model_dump(mode="json") for log in service.patients.activity(patient_id)
    ]
    detail["shift_period"] = service.shift_period(now)
    return detail


@router.post("/patients/{patient_id}/notes", status_code=status.HTTP_201_CREATED)
def add_note(
    patient_id: str,
    payload: NoteRequest,
    service: HandoffService = Depends(get_service),
) -> dict:
    """간호 메모 추가

    Args:
        patient_id: 환자 식별자
        payload: 메모 요청
        service: 인계 서비스

    Returns:
        갱신된 메모 목록과 추가된 활동 기록
    """
    patient, log = service.add_note(patient_id, payload)
    return {
        "nursing_notes": patient.nursing_notes,
        "activity": log.model_dump(mode="json"),
    }
