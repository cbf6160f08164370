from typing import Literal

from pydantic import BaseModel, Field, field_validator

ResponseCategory = Literal["medical", "procedure", "medication", "protocol", "general"]


class ChatMessage(BaseModel):
    """챗봇 입력 문장"""

    message: str = Field(..., description="사용자 입력")

    @field_validator("message")
    @classmethod
    def _require_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("message is empty")
        return text


class ChatRequest(ChatMessage):
    """챗봇 질의"""

    assistant: Literal["general", "nursing"] = Field(
        default="general", description="응답 규칙 세트"
    )


class ChatReply(BaseModel):
    """챗봇 응답"""

    content: str = Field(..., description="응답 내용")
    category: ResponseCategory = Field(..., description="응답 분류")
