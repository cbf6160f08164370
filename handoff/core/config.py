from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from handoff.models.patient import ActivityCategory, Medication, PatientStatus, RiskLevel


class Settings(BaseSettings):
    """환경 변수에서 애플리케이션 설정을 로드"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    environment: Literal["local", "dev", "prod"] = "local"
    version: str = "0.1.0"
    log_level: str = "INFO"
    seed_path: str = "patients.yaml"
    duckdb_path: str = ":memory:"
    scheduler_enabled: bool = True
    rollover_minutes: int = 5
    facility_timezone: str = ""
    speech_base_url: str = ""
    speech_api_key: str = ""


class SeedVitals(BaseModel):
    """시드 활력징후(측정 시각은 분 단위 상대값)"""

    temperature: float
    heart_rate: int
    systolic: int
    diastolic: int
    respiratory_rate: int
    oxygen_saturation: float
    pain_level: int = 0
    taken_minutes_ago: int = 0


class SeedActivity(BaseModel):
    """시드 활동 기록(기록 시각은 분 단위 상대값)"""

    nurse: str
    action: str
    category: ActivityCategory
    details: str = ""
    priority: Literal["low", "medium", "high"] = "medium"
    minutes_ago: int = 0


class SeedPatient(BaseModel):
    """시드 환자 항목(시각은 분 단위 상대값)"""

    id: str
    name: str
    room: str
    admission_date: str = ""
    primary_diagnosis: str = ""
    allergies: list[str] = Field(default_factory=list)
    risk_level: RiskLevel
    isolation_status: str | None = None
    acuity_level: int
    last_vitals_minutes_ago: int | None = None
    next_med_in_minutes: int | None = None
    has_alerts: bool = False
    is_pending_discharge: bool = False
    requires_follow_up: bool = False
    nursing_notes: list[str] = Field(default_factory=list)
    status: PatientStatus | None = None
    vitals: SeedVitals | None = None
    medications: list[Medication] = Field(default_factory=list)
    activity: list[SeedActivity] = Field(default_factory=list)


class SeedData(BaseModel):
    """시드 파일 래퍼"""

    patients: list[SeedPatient] = Field(default_factory=list)
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def resolve(self, minutes: int | None, past: bool) -> datetime | None:
        """분 단위 상대값을 로드 시각 기준 절대 시각으로 변환

        Args:
            minutes: 상대 분
            past: 과거 방향 여부

        Returns:
            절대 시각 또는 None
        """
        if minutes is None:
            return None
        delta = timedelta(minutes=minutes)
        return self.loaded_at - delta if past else self.loaded_at + delta


@lru_cache
def get_settings() -> Settings:
    """캐시된 설정 인스턴스를 반환"""
    return Settings()


@lru_cache
def load_seed_data() -> SeedData:
    """시드 파일(YAML)에서 환자 데이터 로드

    Returns:
        시드 데이터 인스턴스
    """
    settings = get_settings()
    with open(settings.seed_path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return SeedData(**data)


def reload_seed_data() -> SeedData:
    """시드 캐시를 초기화하고 다시 로드

    Returns:
        시드 데이터 인스턴스
    """
    load_seed_data.cache_clear()
    return load_seed_data()
