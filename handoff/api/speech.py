from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from handoff.clients.speech_api import speak, speech_supported

router = APIRouter()


class SpeakRequest(BaseModel):
    """음성 변환 요청"""

    text: str
    patient_id: str = "-"


@router.get("/speech")
def speech_capabilities() -> dict:
    """음성 입출력 지원 여부"""
    supported = speech_supported()
    return {"speech_to_text": supported, "text_to_speech": supported}


@router.post("/speech/speak")
def speak_text(payload: SpeakRequest, background_tasks: BackgroundTasks) -> JSONResponse:
    """텍스트 음성 변환을 백그라운드로 요청

    Args:
        payload: 음성 변환 요청
        background_tasks: FastAPI 백그라운드 작업

    Returns:
        접수 결과(미지원 시 disabled)
    """
    if not speech_supported():
        return JSONResponse({"status": "disabled"})
    background_tasks.add_task(speak, payload.text, payload.patient_id)
    return JSONResponse({"status": "accepted"}, status_code=202)
