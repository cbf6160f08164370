from fastapi import Request

from handoff.core.service import HandoffService


def get_service(request: Request) -> HandoffService:
    """앱 인스턴스에 연결된 인계 서비스를 반환"""
    return request.app.state.service
