from __future__ import annotations

import uuid
from datetime import datetime, timezone

from handoff.core.errors import HandoffClosedError, RequiredFieldError
from handoff.models.handoff import (
    CompletionStatus,
    EntryCategory,
    EntryPriority,
    GuidedPrompt,
    HandoffEntry,
    InputMethod,
    PatientSummary,
    ShiftHandoff,
    ShiftType,
)

TRACKED_CATEGORIES = (
    "assessment",
    "vitals",
    "medications",
    "interventions",
    "pending",
    "alerts",
)

PROMPT_QUESTIONS: tuple[tuple[str, str, bool], ...] = (
    (
        "assessment",
        "How is {patient_name} doing overall? Please describe their current condition "
        "and any changes since the last shift.",
        True,
    ),
    (
        "vitals",
        "What are the latest vital signs? Any concerns with temperature, blood pressure, "
        "heart rate, or oxygen levels?",
        True,
    ),
    (
        "medications",
        "Were all medications given as scheduled? Any missed doses, new medications, "
        "or adverse reactions?",
        True,
    ),
    (
        "interventions",
        "What care interventions were performed this shift? Any procedures, treatments, "
        "or nursing actions?",
        True,
    ),
    (
        "pending",
        "What tasks or orders are still pending for the next shift? Any follow-ups needed?",
        True,
    ),
    (
        "alerts",
        "Are there any safety concerns, behavioral changes, or important alerts the next "
        "nurse should know about?",
        False,
    ),
)


def guided_priority(category: EntryCategory) -> EntryPriority:
    """가이드 응답의 분류별 우선순위"""
    if category == "alerts":
        return "critical"
    if category == "pending":
        return "important"
    return "normal"


class ShiftSummary:
    """환자 한 명의 교대 인계 기록

    항목은 추가만 가능하고, 분류별 완료 플래그는 해당 분류의 첫 항목이
    기록될 때 한 번만 false에서 true로 바뀐다.
    """

    def __init__(
        self,
        patient_id: str,
        shift_type: ShiftType,
        now: datetime | None = None,
        patient_name: str = "the patient",
    ) -> None:
        started = now or datetime.now(timezone.utc)
        self.patient_id = patient_id
        self.patient_name = patient_name
        self.shift = ShiftHandoff(
            id=uuid.uuid4().hex,
            patient_id=patient_id,
            shift_date=started.date().isoformat(),
            shift_type=shift_type,
            start_time=started,
        )
        self.completion = CompletionStatus()
        self.last_updated = started
        self._entries: list[HandoffEntry] = []

    @property
    def entries(self) -> tuple[HandoffEntry, ...]:
        return tuple(self._entries)

    @property
    def is_closed(self) -> bool:
        return self.shift.status != "active"

    def record_entry(
        self,
        category: EntryCategory,
        content: str,
        input_method: InputMethod = "text",
        priority: EntryPriority | None = None,
        now: datetime | None = None,
    ) -> HandoffEntry:
        """인계 항목을 기록하고 완료 상태를 갱신

        Args:
            category: 항목 분류
            content: 기록 내용
            input_method: 입력 방식
            priority: 우선순위(없으면 가이드 규칙 또는 normal)
            now: 기록 시각

        Returns:
            생성된 항목

        Raises:
            HandoffClosedError: 종료된 교대일 때
            RequiredFieldError: 내용이 비어 있을 때
        """
        if self.is_closed:
            raise HandoffClosedError(self.shift.id)
        text = content.strip()
        if not text:
            raise RequiredFieldError(["content"])
        if priority is None:
            priority = guided_priority(category) if input_method == "guided" else "normal"
        timestamp = now or datetime.now(timezone.utc)
        entry = HandoffEntry(
            id=uuid.uuid4().hex,
            handoff_id=self.shift.id,
            timestamp=timestamp,
            input_method=input_method,
            category=category,
            content=text,
            priority=priority,
        )
        self._entries.append(entry)
        if category in TRACKED_CATEGORIES and not getattr(self.completion, category):
            setattr(self.completion, category, True)
        self.last_updated = timestamp
        return entry

    def close(self, status: str = "completed", now: datetime | None = None) -> None:
        """교대를 종료

        Args:
            status: 종료 상태("completed" 또는 "pending-review")
            now: 종료 시각
        """
        if self.is_closed:
            return
        ended = now or datetime.now(timezone.utc)
        self.shift = self.shift.model_copy(update={"status": status, "end_time": ended})
        self.last_updated = ended

    def prompts(self) -> list[GuidedPrompt]:
        """완료 여부가 반영된 가이드 질문 목록"""
        return [
            GuidedPrompt(
                id=category,
                category=category,
                question=question.format(patient_name=self.patient_name),
                required=required,
                completed=getattr(self.completion, category),
            )
            for category, question, required in PROMPT_QUESTIONS
        ]

    def next_prompt(self) -> GuidedPrompt | None:
        """아직 완료되지 않은 첫 가이드 질문"""
        return next((prompt for prompt in self.prompts() if not prompt.completed), None)

    @property
    def completed_count(self) -> int:
        return sum(1 for category in TRACKED_CATEGORIES if getattr(self.completion, category))

    @property
    def is_ready(self) -> bool:
        """필수 질문이 모두 완료되었는지 여부"""
        return all(prompt.completed for prompt in self.prompts() if prompt.required)

    def snapshot(self) -> PatientSummary:
        """직렬화용 요약 모델"""
        return PatientSummary(
            patient_id=self.patient_id,
            current_shift=self.shift,
            entries=list(self._entries),
            completion_status=self.completion.model_copy(),
            last_updated=self.last_updated,
        )
