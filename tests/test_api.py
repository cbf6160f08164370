from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from handoff.core.config import get_settings, load_seed_data
from handoff.core.telemetry import TelemetryStore
from handoff.main import create_app

SEED_PATH = Path(__file__).resolve().parents[1] / "patients.yaml"


def _make_client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("SEED_PATH", str(SEED_PATH))
    monkeypatch.setenv("DUCKDB_PATH", ":memory:")
    monkeypatch.setenv("SCHEDULER_ENABLED", "false")
    monkeypatch.setenv("SPEECH_BASE_URL", "")
    get_settings.cache_clear()
    load_seed_data.cache_clear()
    TelemetryStore.reset()
    app = create_app()
    return TestClient(app)


def test_health(monkeypatch):
    client = _make_client(monkeypatch)
    assert client.get("/health").json() == {"status": "ok"}


def test_patient_list_is_priority_ranked(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.get("/v1/patients")
    assert response.status_code == 200
    body = response.json()
    assert [item["id"] for item in body["patients"]] == ["6", "1", "3", "5", "2", "4"]
    assert body["critical_count"] == 3
    assert body["alerts_count"] == 3
    assert body["patients"][1]["next_med_in"].endswith("m")
    assert body["patients"][1]["last_vitals_ago"] in {"1h ago", "2h ago"}


def test_patient_list_filters(monkeypatch):
    client = _make_client(monkeypatch)
    followup = client.get("/v1/patients", params={"filter_by": "followup"}).json()
    assert [item["id"] for item in followup["patients"]] == ["6", "1", "3", "5", "4"]
    icu = client.get("/v1/patients", params={"search": "icu", "sort_by": "room"}).json()
    assert [item["room"] for item in icu["patients"]] == ["ICU-101", "ICU-102", "ICU-103"]


def test_patient_detail(monkeypatch):
    client = _make_client(monkeypatch)
    body = client.get("/v1/patients/1").json()
    assert body["name"] == "Sarah Johnson"
    assert body["status"]["pain_level"] == 7
    assert body["vitals"]["classification"]["heart_rate"] == "normal"
    assert len(body["medications"]) == 4
    assert body["shift_period"] in {"day", "evening", "night"}


def test_unknown_patient_redirects_to_list(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.get("/v1/patients/999", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/v1/patients"


def test_add_patient_requires_fields(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.post("/v1/patients", json={"name": "Ana Lopez"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Please fill in all required fields"

    created = client.post(
        "/v1/patients",
        json={"name": "Ana Lopez", "room": "Med-300", "primary_diagnosis": "Cellulitis"},
    )
    assert created.status_code == 201
    assert created.json()["id"] == "7"
    assert len(client.get("/v1/patients").json()["patients"]) == 7


def test_handoff_flow(monkeypatch):
    client = _make_client(monkeypatch)
    summary = client.get("/v1/handoff/2").json()
    assert summary["next_prompt"]["id"] == "assessment"
    assert summary["completed_count"] == 0

    response = client.post(
        "/v1/handoff/2/entries", json={"category": "vitals", "content": "All normal"}
    )
    assert response.status_code == 201
    assert response.json()["completion_status"] == {
        "assessment": False,
        "vitals": True,
        "medications": False,
        "interventions": False,
        "pending": False,
        "alerts": False,
    }

    guided = client.post(
        "/v1/handoff/2/entries",
        json={"category": "alerts", "content": "Fall risk", "input_method": "guided"},
    ).json()
    assert guided["entry"]["priority"] == "critical"

    completed = client.post("/v1/handoff/2/complete").json()
    assert completed["current_shift"]["status"] == "completed"
    assert len(completed["entries"]) == 2

    late = client.post(
        "/v1/handoff/2/entries", json={"category": "pending", "content": "Labs"}
    )
    assert late.status_code == 409


def test_chat_keyword_lookup(monkeypatch):
    client = _make_client(monkeypatch)
    body = client.post(
        "/v1/chat", json={"message": "What's the blood pressure reading"}
    ).json()
    assert body["category"] == "medical"
    nursing = client.post(
        "/v1/chat", json={"message": "wound dressing change", "assistant": "nursing"}
    ).json()
    assert nursing["category"] == "procedure"


def test_speech_disabled(monkeypatch):
    client = _make_client(monkeypatch)
    assert client.get("/v1/speech").json() == {
        "speech_to_text": False,
        "text_to_speech": False,
    }
    assert client.post("/v1/speech/speak", json={"text": "hi"}).json() == {
        "status": "disabled"
    }


def test_blank_entry_is_rejected(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.post("/v1/handoff/2/entries", json={"category": "vitals", "content": "   "})
    assert response.status_code == 422
    assert response.json()["fields"] == ["content"]
    summary = client.get("/v1/handoff/2").json()
    assert summary["entries"] == []
    assert not any(summary["completion_status"].values())


def test_voice_entry_uses_final_results(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.post(
        "/v1/handoff/3/voice",
        json={
            "category": "assessment",
            "results": [
                {"text": "patient is", "is_final": False},
                {"text": "Patient resting comfortably", "is_final": True},
            ],
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["entry"]["content"] == "Patient resting comfortably"
    assert body["entry"]["input_method"] == "voice"
    assert body["completion_status"]["assessment"] is True

    interim_only = client.post(
        "/v1/handoff/3/voice",
        json={"category": "vitals", "results": [{"text": "BP", "is_final": False}]},
    )
    assert interim_only.status_code == 422


def test_shift_endpoint(monkeypatch):
    client = _make_client(monkeypatch)
    body = client.get("/v1/shift").json()
    assert body["shift_period"] in {"day", "evening", "night"}
    assert body["server_time"].endswith("Z")


def test_blank_chat_message_is_rejected(monkeypatch):
    client = _make_client(monkeypatch)
    assert client.post("/v1/chat", json={"message": ""}).status_code == 422
    assert client.post("/v1/chat", json={"message": "   "}).status_code == 422


def test_patient_chat_answers_from_record(monkeypatch):
    client = _make_client(monkeypatch)
    body = client.post("/v1/patients/1/chat", json={"message": "Which meds?"}).json()
    assert body["category"] == "medication"
    assert body["content"].startswith("Sarah Johnson is currently on 4 medications")
    pain = client.post("/v1/patients/1/chat", json={"message": "Pain?"}).json()
    assert "7/10" in pain["content"]
    assert client.post("/v1/patients/1/chat", json={"message": " "}).status_code == 422


def test_add_nursing_note_logs_activity(monkeypatch):
    client = _make_client(monkeypatch)
    response = client.post(
        "/v1/patients/2/notes", json={"note": " Ambulated in hallway ", "nurse": "Sarah RN"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["nursing_notes"][0] == "Ambulated in hallway"
    assert body["activity"]["action"] == "Added nursing note"
    assert body["activity"]["category"] == "notes"

    detail = client.get("/v1/patients/2").json()
    assert detail["nursing_notes"][0] == "Ambulated in hallway"
    assert detail["activity_log"][0]["details"] == "Ambulated in hallway"

    blank = client.post("/v1/patients/2/notes", json={"note": "  "})
    assert blank.status_code == 422
    assert blank.json()["fields"] == ["note"]
