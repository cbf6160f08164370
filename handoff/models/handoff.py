from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

EntryCategory = Literal[
    "assessment",
    "vitals",
    "medications",
    "interventions",
    "pending",
    "alerts",
    "other",
]
EntryPriority = Literal["normal", "important", "critical"]
InputMethod = Literal["voice", "text", "guided"]
ShiftType = Literal["day", "evening", "night"]
ShiftState = Literal["active", "completed", "pending-review"]


class HandoffEntry(BaseModel):
    """교대 인계 기록 항목(생성 후 변경 불가)"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="항목 식별자")
    handoff_id: str = Field(..., description="교대 기록 식별자")
    timestamp: datetime = Field(..., description="기록 시각")
    input_method: InputMethod = Field(default="text", description="입력 방식")
    category: EntryCategory = Field(..., description="항목 분류")
    content: str = Field(..., description="기록 내용")
    priority: EntryPriority = Field(default="normal", description="우선순위")
    is_complete: bool = Field(default=True, description="완료 여부")


class CompletionStatus(BaseModel):
    """분류별 기록 완료 상태"""

    assessment: bool = False
    vitals: bool = False
    medications: bool = False
    interventions: bool = False
    pending: bool = False
    alerts: bool = False


class ShiftHandoff(BaseModel):
    """교대 단위 인계 기록"""

    id: str = Field(..., description="교대 기록 식별자")
    patient_id: str = Field(..., description="환자 식별자")
    shift_date: str = Field(..., description="교대 일자(YYYY-MM-DD)")
    shift_type: ShiftType = Field(..., description="교대 구분")
    start_time: datetime = Field(..., description="시작 시각")
    end_time: datetime | None = Field(default=None, description="종료 시각")
    status: ShiftState = Field(default="active", description="진행 상태")


class GuidedPrompt(BaseModel):
    """가이드 질문"""

    id: str
    category: EntryCategory
    question: str
    required: bool = True
    completed: bool = False


class PatientSummary(BaseModel):
    """환자별 교대 인계 요약"""

    patient_id: str
    current_shift: ShiftHandoff
    entries: list[HandoffEntry]
    completion_status: CompletionStatus
    last_updated: datetime


class EntryRequest(BaseModel):
    """인계 항목 기록 요청"""

    category: EntryCategory
    content: str
    input_method: InputMethod = "text"
    priority: EntryPriority | None = None


class VoiceResult(BaseModel):
    """음성 인식 결과 한 건"""

    text: str
    is_final: bool = True


class VoiceEntryRequest(BaseModel):
    """음성 인식 결과로 인계 항목 기록 요청"""

    category: EntryCategory
    results: list[VoiceResult] = Field(default_factory=list)
    priority: EntryPriority | None = None
