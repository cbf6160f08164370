from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler

from handoff.core.service import HandoffService

_scheduler: BackgroundScheduler | None = None


def start_scheduler(service: HandoffService) -> BackgroundScheduler:
    """교대 전환용 백그라운드 스케줄러를 시작

    Args:
        service: 인계 서비스

    Returns:
        BackgroundScheduler 인스턴스
    """
    global _scheduler
    if _scheduler and _scheduler.running:
        _scheduler.shutdown(wait=False)
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        service.run_rollover,
        "interval",
        minutes=max(service.settings.rollover_minutes, 1),
        id="shift-rollover",
        replace_existing=True,
    )
    scheduler.start()
    _scheduler = scheduler
    return scheduler


def stop_scheduler() -> None:
    """실행 중인 스케줄러를 종료"""
    global _scheduler
    if _scheduler and _scheduler.running:
        _scheduler.shutdown(wait=False)
    _scheduler = None
