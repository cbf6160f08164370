from fastapi import APIRouter, Depends

from handoff.api.deps import get_service
from handoff.core.responder import respond
from handoff.core.service import HandoffService
from handoff.models.chat import ChatMessage, ChatReply, ChatRequest

router = APIRouter()


@router.post("/chat")
def chat(payload: ChatRequest) -> ChatReply:
    """키워드 규칙으로 챗봇 응답 생성

    Args:
        payload: 사용자 질의

    Returns:
        응답 내용과 분류
    """
    return respond(payload.message, payload.assistant)


@router.post("/patients/{patient_id}/chat")
def patient_chat(
    patient_id: str,
    payload: ChatMessage,
    service: HandoffService = Depends(get_service),
) -> ChatReply:
    """환자 기록 기반 질의응답"""
    return service.patient_chat(patient_id, payload.message)
