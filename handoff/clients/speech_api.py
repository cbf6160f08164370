from __future__ import annotations

import httpx

from handoff.core.config import get_settings
from handoff.core.logger import log_event


def speech_supported() -> bool:
    """음성 서비스 설정 여부"""
    return bool(get_settings().speech_base_url.strip())


def _headers() -> dict:
    settings = get_settings()
    headers = {}
    if settings.speech_api_key:
        headers["Authorization"] = f"Bearer {settings.speech_api_key}"
    return headers


def speak(text: str, patient_id: str = "-") -> None:
    """텍스트 음성 변환 요청(결과를 기다리지 않음)

    서비스가 설정되지 않았거나 요청이 실패해도 예외를 올리지 않는다.

    Args:
        text: 읽어 줄 문장
        patient_id: 로그용 환자 식별자
    """
    if not speech_supported() or not text.strip():
        return
    url = get_settings().speech_base_url.rstrip("/") + "/tts"
    try:
        with httpx.Client(timeout=10.0) as client:
            response = client.post(url, json={"text": text}, headers=_headers())
            response.raise_for_status()
    except httpx.HTTPError as exc:
        log_event(
            "speech_failed",
            "WARNING",
            patient_id,
            "speech",
            str(exc),
            error_code="SPEECH_TTS_001",
        )


class VoiceInputSession:
    """음성 입력 세션

    중간 인식 결과는 버리고 확정 결과만 ``transcript``에 누적한다.
    """

    def __init__(self, supported: bool | None = None) -> None:
        self.is_supported = speech_supported() if supported is None else supported
        self.is_listening = False
        self.transcript = ""

    def start(self) -> bool:
        """인식 시작

        Returns:
            시작 여부(미지원 환경이면 False)
        """
        if not self.is_supported:
            self.is_listening = False
            return False
        self.is_listening = True
        return True

    def stop(self) -> None:
        self.is_listening = False

    def clear(self) -> None:
        self.transcript = ""

    def add_result(self, text: str, is_final: bool) -> None:
        """인식 결과 반영

        Args:
            text: 인식 문장
            is_final: 확정 결과 여부
        """
        if not self.is_listening or not is_final or not text:
            return
        self.transcript += text + " "

    def final_text(self) -> str:
        """입력으로 사용할 확정 문장"""
        return self.transcript.strip()
