from datetime import datetime, timezone
from pathlib import Path

import pytest

from handoff.core.config import get_settings, load_seed_data
from handoff.core.errors import HandoffClosedError, PatientNotFoundError
from handoff.core.repository import HandoffRepository, PatientRepository
from handoff.core.service import HandoffService
from handoff.core.telemetry import TelemetryStore
from handoff.models.handoff import EntryRequest, VoiceEntryRequest, VoiceResult
from handoff.models.patient import NoteRequest

SEED_PATH = Path(__file__).resolve().parents[1] / "patients.yaml"
DAY = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)
EVENING = datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc)


def _make_service(monkeypatch: pytest.MonkeyPatch) -> HandoffService:
    monkeypatch.setenv("SEED_PATH", str(SEED_PATH))
    monkeypatch.setenv("DUCKDB_PATH", ":memory:")
    monkeypatch.setenv("FACILITY_TIMEZONE", "UTC")
    get_settings.cache_clear()
    load_seed_data.cache_clear()
    TelemetryStore.reset()
    return HandoffService(
        PatientRepository.from_seed(load_seed_data()),
        HandoffRepository(),
        get_settings(),
    )


def test_record_entry_logs_event(monkeypatch):
    service = _make_service(monkeypatch)
    entry = service.record_entry(
        "3", EntryRequest(category="medications", content="All given on time"), now=DAY
    )
    assert entry.category == "medications"
    assert service.summary("3", now=DAY).completion.medications is True

    rows = TelemetryStore().query_logs("event = ?", ["entry_recorded"])
    assert len(rows) == 1
    assert rows[0][3] == "3"
    assert rows[0][7] == "medications"
    assert rows[0][8] == 1


def test_complete_handoff_closes_shift(monkeypatch):
    service = _make_service(monkeypatch)
    summary = service.complete_handoff("1", now=DAY)
    assert summary.shift.status == "completed"
    with pytest.raises(HandoffClosedError):
        service.record_entry("1", EntryRequest(category="vitals", content="late"), now=DAY)
    assert TelemetryStore().query_logs("event = ?", ["handoff_completed"])


def test_unknown_patient(monkeypatch):
    service = _make_service(monkeypatch)
    with pytest.raises(PatientNotFoundError):
        service.summary("999", now=DAY)


def test_run_rollover_uses_facility_clock(monkeypatch):
    service = _make_service(monkeypatch)
    service.summary("1", now=DAY)
    service.summary("2", now=DAY)

    assert service.run_rollover(now=DAY) == []
    assert service.run_rollover(now=EVENING) == ["1", "2"]
    assert service.summary("1", now=EVENING).shift.shift_type == "evening"
    rows = TelemetryStore().query_logs("event = ?", ["shift_rollover"])
    assert len(rows) == 2


def test_voice_entry_records_final_transcript(monkeypatch):
    service = _make_service(monkeypatch)
    entry = service.record_voice_entry(
        "5",
        VoiceEntryRequest(
            category="pending",
            results=[
                VoiceResult(text="CBC", is_final=False),
                VoiceResult(text="CBC pending", is_final=True),
                VoiceResult(text="for morning", is_final=True),
            ],
        ),
        now=DAY,
    )
    assert entry.content == "CBC pending for morning"
    assert entry.input_method == "voice"
    assert service.summary("5", now=DAY).completion.pending is True


def test_add_note_logs_event(monkeypatch):
    service = _make_service(monkeypatch)
    patient, log = service.add_note("2", NoteRequest(note="Tolerating diet", nurse="Sarah RN"))
    assert patient.nursing_notes[0] == "Tolerating diet"
    assert log.nurse == "Sarah RN"
    rows = TelemetryStore().query_logs("event = ?", ["note_added"])
    assert len(rows) == 1
    assert rows[0][3] == "2"


def test_patient_chat_uses_repository_data(monkeypatch):
    service = _make_service(monkeypatch)
    reply = service.patient_chat("1", "recent activity log")
    assert reply.content.startswith("Recent activities: Updated pain assessment by Sarah RN")
    with pytest.raises(PatientNotFoundError):
        service.patient_chat("999", "hello")
