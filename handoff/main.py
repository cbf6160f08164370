from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from handoff.api.routes import router as api_router
from handoff.core.config import get_settings, load_seed_data
from handoff.core.errors import HandoffClosedError, PatientNotFoundError, RequiredFieldError
from handoff.core.logging import configure_logging
from handoff.core.repository import HandoffRepository, PatientRepository
from handoff.core.scheduler import start_scheduler
from handoff.core.service import HandoffService


def _register_error_handlers(app: FastAPI) -> None:
    """도메인 예외를 HTTP 응답으로 변환"""

    @app.exception_handler(PatientNotFoundError)
    async def _patient_not_found(request: Request, exc: PatientNotFoundError):
        return RedirectResponse("/v1/patients", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(RequiredFieldError)
    async def _required_field(request: Request, exc: RequiredFieldError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.message, "error_code": exc.code, "fields": exc.fields},
        )

    @app.exception_handler(HandoffClosedError)
    async def _handoff_closed(request: Request, exc: HandoffClosedError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": exc.message, "error_code": exc.code},
        )


def create_app() -> FastAPI:
    """애플리케이션을 생성하고 FastAPI를 설정"""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Shift Handoff", version=settings.version)
    app.include_router(api_router)
    _register_error_handlers(app)

    app.state.service = HandoffService(
        PatientRepository.from_seed(load_seed_data()),
        HandoffRepository(),
        settings,
    )

    if settings.scheduler_enabled:
        start_scheduler(app.state.service)

    return app
