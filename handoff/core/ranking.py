from __future__ import annotations

from typing import Iterable, Literal, Mapping

from handoff.models.patient import Patient, PatientStatus

SortBy = Literal["priority", "acuity", "room", "name"]
FilterBy = Literal["all", "critical", "alerts", "followup"]

RISK_RANK = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def priority_key(patient: Patient) -> tuple[int, bool, int, str]:
    """우선순위 정렬 키

    중증도 높은 순, 경보 있는 환자 먼저, 위험 등급 높은 순, 이름 오름차순.

    Args:
        patient: 환자

    Returns:
        오름차순 정렬용 키 튜플
    """
    return (
        -patient.acuity_level,
        not patient.has_alerts,
        -RISK_RANK[patient.risk_level],
        patient.name,
    )


def sort_by_priority(patients: Iterable[Patient]) -> list[Patient]:
    """환자 목록을 우선순위로 정렬

    모든 키가 같으면 입력 순서를 유지한다.

    Args:
        patients: 환자 목록

    Returns:
        정렬된 새 목록
    """
    return sorted(patients, key=priority_key)


def sort_patients(patients: Iterable[Patient], sort_by: SortBy = "priority") -> list[Patient]:
    """정렬 기준에 따라 환자 목록을 정렬

    Args:
        patients: 환자 목록
        sort_by: 정렬 기준

    Returns:
        정렬된 새 목록
    """
    if sort_by == "acuity":
        return sorted(patients, key=lambda patient: -patient.acuity_level)
    if sort_by == "room":
        return sorted(patients, key=lambda patient: patient.room)
    if sort_by == "name":
        return sorted(patients, key=lambda patient: patient.name)
    return sort_by_priority(patients)


def is_critical(patient: Patient) -> bool:
    return patient.risk_level == "critical" or patient.acuity_level >= 4


def has_alert(patient: Patient, status: PatientStatus | None) -> bool:
    return patient.has_alerts or bool(status and status.has_critical_labs)


def _matches_search(patient: Patient, search: str) -> bool:
    term = search.strip().lower()
    if not term:
        return True
    return (
        term in patient.name.lower()
        or term in patient.room.lower()
        or term in patient.primary_diagnosis.lower()
    )


def filter_patients(
    patients: Iterable[Patient],
    statuses: Mapping[str, PatientStatus],
    search: str = "",
    filter_by: FilterBy = "all",
) -> list[Patient]:
    """검색어와 필터로 환자 목록을 거름

    Args:
        patients: 환자 목록
        statuses: 환자 식별자별 상태
        search: 이름/병실/진단 검색어
        filter_by: 필터 구분

    Returns:
        조건에 맞는 환자 목록
    """
    selected: list[Patient] = []
    for patient in patients:
        if not _matches_search(patient, search):
            continue
        if filter_by == "critical" and not is_critical(patient):
            continue
        if filter_by == "alerts" and not has_alert(patient, statuses.get(patient.id)):
            continue
        if filter_by == "followup" and not (
            patient.requires_follow_up or patient.is_pending_discharge
        ):
            continue
        selected.append(patient)
    return selected


def critical_count(patients: Iterable[Patient]) -> int:
    """위중 환자 수"""
    return sum(1 for patient in patients if is_critical(patient))


def alerts_count(patients: Iterable[Patient], statuses: Mapping[str, PatientStatus]) -> int:
    """경보 환자 수"""
    return sum(1 for patient in patients if has_alert(patient, statuses.get(patient.id)))
