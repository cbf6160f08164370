from fastapi import APIRouter

from handoff.api.chat import router as chat_router
from handoff.api.handoffs import router as handoff_router
from handoff.api.health import router as health_router
from handoff.api.patients import router as patients_router
from handoff.api.shift import router as shift_router
from handoff.api.speech import router as speech_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(patients_router, prefix="/v1", tags=["patients"])
router.include_router(handoff_router, prefix="/v1", tags=["handoff"])
router.include_router(chat_router, prefix="/v1", tags=["chat"])
router.include_router(shift_router, prefix="/v1", tags=["shift"])
router.include_router(speech_router, prefix="/v1", tags=["speech"])
