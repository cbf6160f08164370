from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

RiskLevel = Literal["low", "medium", "high", "critical"]
MobilityStatus = Literal["bedrest", "assistance", "independent", "restricted"]


class Patient(BaseModel):
    """환자 기본 정보"""

    id: str = Field(..., description="환자 식별자")
    name: str = Field(..., description="환자 이름")
    room: str = Field(..., description="병실")
    admission_date: str = Field(default="", description="입원일(YYYY-MM-DD)")
    primary_diagnosis: str = Field(default="", description="주 진단명")
    allergies: list[str] = Field(default_factory=list, description="알레르기 목록")
    risk_level: RiskLevel = Field(..., description="위험 등급")
    isolation_status: str | None = Field(default=None, description="격리 상태")
    acuity_level: int = Field(..., ge=1, le=5, strict=True, description="중증도(5가 최고)")
    last_vitals_time: datetime | None = Field(default=None, description="최근 활력징후 측정 시각")
    next_med_time: datetime | None = Field(default=None, description="다음 투약 시각")
    has_alerts: bool = Field(default=False, description="경보 여부")
    is_pending_discharge: bool = Field(default=False, description="퇴원 예정 여부")
    requires_follow_up: bool = Field(default=False, description="추적 관찰 필요 여부")
    nursing_notes: list[str] = Field(default_factory=list, description="간호 메모")


class PatientStatus(BaseModel):
    """환자 오더/검사/메시지 상태"""

    has_new_orders: bool = Field(default=False, description="신규 오더 여부")
    has_critical_labs: bool = Field(default=False, description="위험 검사 결과 여부")
    has_unread_messages: bool = Field(default=False, description="읽지 않은 메시지 여부")
    last_assessment_time: datetime | None = Field(default=None, description="최근 사정 시각")
    next_scheduled_care: datetime | None = Field(default=None, description="다음 예정 간호 시각")
    pain_level: int | None = Field(default=None, ge=0, le=10, description="통증 점수(0-10)")
    mobility_status: MobilityStatus = Field(..., description="거동 상태")


class VitalsSnapshot(BaseModel):
    """활력징후 측정값"""

    temperature: float = Field(..., description="체온(화씨)")
    heart_rate: int = Field(..., description="심박수")
    systolic: int = Field(..., description="수축기 혈압")
    diastolic: int = Field(..., description="이완기 혈압")
    respiratory_rate: int = Field(..., description="호흡수")
    oxygen_saturation: float = Field(..., description="산소포화도")
    pain_level: int = Field(default=0, ge=0, le=10, description="통증 점수")
    timestamp: datetime = Field(..., description="측정 시각")


class Medication(BaseModel):
    """투약 정보"""

    name: str = Field(..., description="약품명")
    dosage: str = Field(..., description="용량")
    frequency: str = Field(..., description="투여 빈도")
    next_due: str = Field(default="", description="다음 투여 예정")
    last_given: str = Field(default="", description="최근 투여")


class NewPatient(BaseModel):
    """환자 추가 요청"""

    name: str = ""
    room: str = ""
    primary_diagnosis: str = ""
    admission_date: str = ""
    allergies: list[str] = Field(default_factory=list)
    risk_level: RiskLevel = "low"
    isolation_status: str | None = None
    acuity_level: int = Field(default=1, ge=1, le=5)
    nursing_notes: list[str] = Field(default_factory=list)

    @field_validator("allergies")
    @classmethod
    def _dedupe_allergies(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for allergy in value:
            text = allergy.strip()
            if text and text not in cleaned:
                cleaned.append(text)
        return cleaned

    @field_validator("nursing_notes")
    @classmethod
    def _drop_blank_notes(cls, value: list[str]) -> list[str]:
        return [note.strip() for note in value if note.strip()]

    def missing_fields(self) -> list[str]:
        """비어 있는 필수 항목 목록

        Returns:
            누락 필드명 목록
        """
        required = {
            "name": self.name,
            "room": self.room,
            "primary_diagnosis": self.primary_diagnosis,
        }
        return [field for field, value in required.items() if not value.strip()]


ActivityCategory = Literal[
    "vitals", "medication", "assessment", "notes", "procedure", "communication"
]


class ActivityLog(BaseModel):
    """환자 활동 기록"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="기록 식별자")
    timestamp: datetime = Field(..., description="기록 시각")
    nurse: str = Field(..., description="작성 간호사")
    action: str = Field(..., description="수행 내용")
    category: ActivityCategory = Field(..., description="활동 분류")
    details: str = Field(default="", description="상세 내용")
    priority: Literal["low", "medium", "high"] = Field(default="medium", description="중요도")


class NoteRequest(BaseModel):
    """간호 메모 추가 요청"""

    note: str = ""
    nurse: str = "Unknown RN"
