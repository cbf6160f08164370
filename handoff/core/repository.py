from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Iterable, Mapping

from handoff.core.config import SeedData
from handoff.core.errors import PatientNotFoundError, RequiredFieldError
from handoff.core.shift import ShiftSummary
from handoff.core.status import ShiftPeriod
from handoff.models.handoff import EntryCategory, EntryPriority, HandoffEntry, InputMethod
from handoff.models.patient import (
    ActivityCategory,
    ActivityLog,
    Medication,
    NewPatient,
    Patient,
    PatientStatus,
    VitalsSnapshot,
)


class PatientRepository:
    """메모리 기반 환자 저장소"""

    def __init__(
        self,
        patients: Iterable[Patient] = (),
        statuses: Mapping[str, PatientStatus] | None = None,
        vitals: Mapping[str, VitalsSnapshot] | None = None,
        medications: Mapping[str, list[Medication]] | None = None,
        activity: Mapping[str, list[ActivityLog]] | None = None,
    ) -> None:
        self._patients: dict[str, Patient] = {patient.id: patient for patient in patients}
        self._statuses = dict(statuses or {})
        self._vitals = dict(vitals or {})
        self._medications = {key: list(value) for key, value in (medications or {}).items()}
        self._activity = {key: list(value) for key, value in (activity or {}).items()}

    @classmethod
    def from_seed(cls, seed: SeedData) -> "PatientRepository":
        """시드 데이터로 저장소 생성

        Args:
            seed: 시드 데이터

        Returns:
            환자 저장소
        """
        patients: list[Patient] = []
        statuses: dict[str, PatientStatus] = {}
        vitals: dict[str, VitalsSnapshot] = {}
        medications: dict[str, list[Medication]] = {}
        activity: dict[str, list[ActivityLog]] = {}
        for item in seed.patients:
            patients.append(
                Patient(
                    **item.model_dump(
                        exclude={
                            "last_vitals_minutes_ago",
                            "next_med_in_minutes",
                            "status",
                            "vitals",
                            "medications",
                            "activity",
                        }
                    ),
                    last_vitals_time=seed.resolve(item.last_vitals_minutes_ago, past=True),
                    next_med_time=seed.resolve(item.next_med_in_minutes, past=False),
                )
            )
            if item.status is not None:
                statuses[item.id] = item.status
            if item.vitals is not None:
                vitals[item.id] = VitalsSnapshot(
                    **item.vitals.model_dump(exclude={"taken_minutes_ago"}),
                    timestamp=seed.resolve(item.vitals.taken_minutes_ago, past=True),
                )
            if item.medications:
                medications[item.id] = list(item.medications)
            if item.activity:
                logs = [
                    ActivityLog(
                        id=f"{item.id}-{index}",
                        timestamp=seed.resolve(log.minutes_ago, past=True),
                        **log.model_dump(exclude={"minutes_ago"}),
                    )
                    for index, log in enumerate(item.activity, start=1)
                ]
                activity[item.id] = sorted(logs, key=lambda log: log.timestamp, reverse=True)
        return cls(patients, statuses, vitals, medications, activity)

    def all_patients(self) -> list[Patient]:
        return list(self._patients.values())

    def get(self, patient_id: str) -> Patient:
        """환자 조회

        Raises:
            PatientNotFoundError: 식별자가 없을 때
        """
        patient = self._patients.get(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    @property
    def statuses(self) -> dict[str, PatientStatus]:
        return dict(self._statuses)

    def status(self, patient_id: str) -> PatientStatus | None:
        return self._statuses.get(patient_id)

    def vitals(self, patient_id: str) -> VitalsSnapshot | None:
        return self._vitals.get(patient_id)

    def medications(self, patient_id: str) -> list[Medication]:
        return list(self._medications.get(patient_id, []))

    def activity(self, patient_id: str) -> list[ActivityLog]:
        """최신순 활동 기록"""
        return list(self._activity.get(patient_id, []))

    def log_activity(
        self,
        patient_id: str,
        action: str,
        category: ActivityCategory,
        details: str,
        nurse: str,
        priority: str = "medium",
        now: datetime | None = None,
    ) -> ActivityLog:
        """활동 기록을 맨 앞에 추가

        Args:
            patient_id: 환자 식별자
            action: 수행 내용
            category: 활동 분류
            details: 상세 내용
            nurse: 작성 간호사
            priority: 중요도
            now: 기록 시각

        Returns:
            추가된 활동 기록
        """
        self.get(patient_id)
        log = ActivityLog(
            id=uuid.uuid4().hex,
            timestamp=now or datetime.now(timezone.utc),
            nurse=nurse,
            action=action,
            category=category,
            details=details,
            priority=priority,
        )
        self._activity.setdefault(patient_id, []).insert(0, log)
        return log

    def add_note(
        self, patient_id: str, note: str, nurse: str, now: datetime | None = None
    ) -> tuple[Patient, ActivityLog]:
        """간호 메모를 추가하고 활동 기록을 남김

        Raises:
            PatientNotFoundError: 환자가 없을 때
            RequiredFieldError: 메모가 비어 있을 때
        """
        patient = self.get(patient_id)
        text = note.strip()
        if not text:
            raise RequiredFieldError(["note"])
        patient = patient.model_copy(update={"nursing_notes": [text, *patient.nursing_notes]})
        self._patients[patient_id] = patient
        log = self.log_activity(patient_id, "Added nursing note", "notes", text, nurse, now=now)
        return patient, log

    def _next_id(self) -> str:
        numeric = [int(key) for key in self._patients if key.isdigit()]
        return str(max(numeric, default=0) + 1)

    def add(self, request: NewPatient) -> Patient:
        """신규 환자 등록

        Args:
            request: 환자 추가 요청

        Returns:
            등록된 환자

        Raises:
            RequiredFieldError: 필수 항목이 비어 있을 때
        """
        missing = request.missing_fields()
        if missing:
            raise RequiredFieldError(missing)
        patient = Patient(
            id=self._next_id(),
            name=request.name.strip(),
            room=request.room.strip(),
            admission_date=request.admission_date.strip(),
            primary_diagnosis=request.primary_diagnosis.strip(),
            allergies=request.allergies,
            risk_level=request.risk_level,
            isolation_status=request.isolation_status,
            acuity_level=request.acuity_level,
            nursing_notes=request.nursing_notes,
        )
        self._patients[patient.id] = patient
        self._statuses[patient.id] = PatientStatus(mobility_status="independent")
        return patient


class HandoffRepository:
    """환자별 현재 교대 기록과 이력을 보관

    요청 스레드와 스케줄러 스레드가 함께 접근하므로 교대 시작, 항목 기록,
    종료, 전환은 모두 저장소 잠금 안에서 수행한다.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._current: dict[str, ShiftSummary] = {}
        self._history: dict[str, list[ShiftSummary]] = {}

    def start_shift(
        self,
        patient: Patient,
        shift_type: ShiftPeriod,
        now: datetime | None = None,
    ) -> ShiftSummary:
        """새 교대를 시작하고 이전 교대를 이력으로 옮김

        Args:
            patient: 환자
            shift_type: 근무조
            now: 시작 시각

        Returns:
            새 교대 기록
        """
        started = now or datetime.now(timezone.utc)
        with self._lock:
            previous = self._current.get(patient.id)
            if previous is not None:
                previous.close("pending-review", now=started)
                self._history.setdefault(patient.id, []).append(previous)
            summary = ShiftSummary(patient.id, shift_type, now=started, patient_name=patient.name)
            self._current[patient.id] = summary
            return summary

    def current(
        self,
        patient: Patient,
        shift_type: ShiftPeriod,
        now: datetime | None = None,
    ) -> ShiftSummary:
        """현재 교대 기록(없으면 시작)"""
        with self._lock:
            summary = self._current.get(patient.id)
            if summary is None:
                summary = self.start_shift(patient, shift_type, now=now)
            return summary

    def record_entry(
        self,
        patient: Patient,
        shift_type: ShiftPeriod,
        category: EntryCategory,
        content: str,
        input_method: InputMethod = "text",
        priority: EntryPriority | None = None,
        now: datetime | None = None,
    ) -> tuple[HandoffEntry, ShiftSummary]:
        """현재 교대에 항목을 기록

        Returns:
            생성된 항목과 항목이 기록된 교대

        Raises:
            HandoffClosedError: 현재 교대가 종료되었을 때
            RequiredFieldError: 내용이 비어 있을 때
        """
        with self._lock:
            summary = self.current(patient, shift_type, now=now)
            entry = summary.record_entry(
                category, content, input_method=input_method, priority=priority, now=now
            )
            return entry, summary

    def complete(
        self,
        patient: Patient,
        shift_type: ShiftPeriod,
        now: datetime | None = None,
    ) -> ShiftSummary:
        """현재 교대를 완료 처리"""
        with self._lock:
            summary = self.current(patient, shift_type, now=now)
            summary.close("completed", now=now)
            return summary

    def history(self, patient_id: str) -> list[ShiftSummary]:
        with self._lock:
            return list(self._history.get(patient_id, []))

    def rollover(
        self,
        patients: Iterable[Patient],
        shift_type: ShiftPeriod,
        now: datetime | None = None,
    ) -> list[str]:
        """근무조가 바뀐 환자의 교대를 새로 시작

        Args:
            patients: 환자 목록
            shift_type: 현재 근무조
            now: 기준 시각

        Returns:
            교대가 새로 시작된 환자 식별자 목록
        """
        rolled: list[str] = []
        with self._lock:
            for patient in patients:
                summary = self._current.get(patient.id)
                if summary is None or summary.shift.shift_type == shift_type:
                    continue
                self.start_shift(patient, shift_type, now=now)
                rolled.append(patient.id)
        return rolled
