from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from handoff.api.deps import get_service
from handoff.core.service import HandoffService
from handoff.utils.parsing import format_timestamp

router = APIRouter()


@router.get("/shift")
def current_shift(service: HandoffService = Depends(get_service)) -> dict:
    """현재 근무조와 서버 시각"""
    now = datetime.now(timezone.utc)
    return {
        "shift_period": service.shift_period(now),
        "server_time": format_timestamp(now),
    }
