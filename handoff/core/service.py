from __future__ import annotations

from datetime import datetime, timezone

from handoff.clients.speech_api import VoiceInputSession
from handoff.core.config import Settings
from handoff.core.logger import log_event
from handoff.core.repository import HandoffRepository, PatientRepository
from handoff.core.responder import patient_response
from handoff.core.shift import ShiftSummary
from handoff.core.status import current_shift_period
from handoff.models.chat import ChatReply
from handoff.models.handoff import EntryRequest, HandoffEntry, VoiceEntryRequest
from handoff.models.patient import ActivityLog, NewPatient, NoteRequest, Patient


class HandoffService:
    """저장소와 설정을 묶어 인계 작업을 처리"""

    def __init__(
        self,
        patients: PatientRepository,
        handoffs: HandoffRepository,
        settings: Settings,
    ) -> None:
        self.patients = patients
        self.handoffs = handoffs
        self.settings = settings

    def shift_period(self, now: datetime | None = None) -> str:
        return current_shift_period(self.settings.facility_timezone, now)

    def summary(self, patient_id: str, now: datetime | None = None) -> ShiftSummary:
        """환자의 현재 교대 기록

        Raises:
            PatientNotFoundError: 환자가 없을 때
        """
        patient = self.patients.get(patient_id)
        return self.handoffs.current(patient, self.shift_period(now), now=now)

    def record_entry(
        self, patient_id: str, request: EntryRequest, now: datetime | None = None
    ) -> HandoffEntry:
        """인계 항목 기록

        Args:
            patient_id: 환자 식별자
            request: 기록 요청
            now: 기록 시각

        Returns:
            생성된 항목

        Raises:
            PatientNotFoundError: 환자가 없을 때
            HandoffClosedError: 종료된 교대일 때
            RequiredFieldError: 내용이 비어 있을 때
        """
        patient = self.patients.get(patient_id)
        entry, summary = self.handoffs.record_entry(
            patient,
            self.shift_period(now),
            request.category,
            request.content,
            input_method=request.input_method,
            priority=request.priority,
            now=now,
        )
        log_event(
            "entry_recorded",
            "INFO",
            patient_id,
            "handoff",
            "인계 항목 기록",
            category=entry.category,
            entry_count=len(summary.entries),
        )
        return entry

    def complete_handoff(self, patient_id: str, now: datetime | None = None) -> ShiftSummary:
        """현재 교대 인계 완료 처리

        Args:
            patient_id: 환자 식별자
            now: 완료 시각

        Returns:
            종료된 교대 기록
        """
        patient = self.patients.get(patient_id)
        summary = self.handoffs.complete(patient, self.shift_period(now), now=now)
        log_event(
            "handoff_completed",
            "INFO",
            patient_id,
            "handoff",
            "인계 완료",
            entry_count=len(summary.entries),
        )
        return summary

    def record_voice_entry(
        self, patient_id: str, request: VoiceEntryRequest, now: datetime | None = None
    ) -> HandoffEntry:
        """음성 인식 결과의 확정 문장을 인계 항목으로 기록

        Args:
            patient_id: 환자 식별자
            request: 인식 결과 목록과 분류
            now: 기록 시각

        Returns:
            생성된 항목
        """
        session = VoiceInputSession(supported=True)
        session.start()
        for result in request.results:
            session.add_result(result.text, result.is_final)
        session.stop()
        return self.record_entry(
            patient_id,
            EntryRequest(
                category=request.category,
                content=session.final_text(),
                input_method="voice",
                priority=request.priority,
            ),
            now=now,
        )

    def add_note(
        self, patient_id: str, request: NoteRequest, now: datetime | None = None
    ) -> tuple[Patient, ActivityLog]:
        """간호 메모 추가

        Raises:
            PatientNotFoundError: 환자가 없을 때
            RequiredFieldError: 메모가 비어 있을 때
        """
        patient, log = self.patients.add_note(patient_id, request.note, request.nurse, now=now)
        log_event("note_added", "INFO", patient_id, "patients", log.action)
        return patient, log

    def patient_chat(
        self, patient_id: str, message: str, now: datetime | None = None
    ) -> ChatReply:
        """환자 기록 기반 챗봇 응답

        Raises:
            PatientNotFoundError: 환자가 없을 때
        """
        return patient_response(
            message,
            self.patients.get(patient_id),
            vitals=self.patients.vitals(patient_id),
            medications=self.patients.medications(patient_id),
            activity=self.patients.activity(patient_id),
            now=now,
        )

    def add_patient(self, request: NewPatient) -> Patient:
        """신규 환자 등록

        Raises:
            RequiredFieldError: 필수 항목 누락 시
        """
        patient = self.patients.add(request)
        log_event("patient_added", "INFO", patient.id, "patients", "환자 등록")
        return patient

    def run_rollover(self, now: datetime | None = None) -> list[str]:
        """근무조 변경에 따른 교대 전환

        Args:
            now: 기준 시각

        Returns:
            새 교대가 시작된 환자 식별자 목록
        """
        current = now or datetime.now(timezone.utc)
        period = self.shift_period(current)
        rolled = self.handoffs.rollover(self.patients.all_patients(), period, now=current)
        for patient_id in rolled:
            log_event(
                "shift_rollover",
                "INFO",
                patient_id,
                "scheduler",
                f"교대 전환: {period}",
            )
        return rolled
