import random
from datetime import datetime, timedelta, timezone

from handoff.core.responder import (
    GENERAL_DEFAULTS,
    GENERAL_RULES,
    NURSING_DEFAULTS,
    lookup_response,
    patient_response,
    respond,
)
from handoff.models.patient import ActivityLog, Medication, Patient, VitalsSnapshot

NOW = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


def test_blood_pressure_question_is_deterministic():
    replies = [lookup_response("What's the blood pressure reading") for _ in range(5)]
    assert all(reply.category == "medical" for reply in replies)
    assert {reply.content for reply in replies} == {GENERAL_RULES[0].response}
    assert GENERAL_RULES[0].trigger == "blood pressure"


def test_nursing_rulebook_matches_blood_pressure():
    reply = respond("What's the blood pressure reading", "nursing")
    assert reply.category == "medical"
    assert reply.content.startswith("Normal Adult Vital Signs")


def test_first_matching_rule_wins():
    reply = lookup_response("pain medication schedule")
    assert reply.category == "medical"
    assert reply.content.startswith("Use the 0-10 pain scale")


def test_lookup_is_case_insensitive():
    reply = lookup_response("Which PPE for MRSA?")
    assert reply.category == "procedure"


def test_trigger_groups_keep_rule_order():
    triggers = [rule.trigger for rule in GENERAL_RULES]
    assert triggers[:4] == ["blood pressure", "hypertension", "pain", "pain scale"]
    assert triggers.index("medication") < triggers.index("handoff")


def test_unmatched_input_returns_default():
    reply = lookup_response("hello there", rng=random.Random(0))
    assert reply.category == "general"
    assert reply.content in GENERAL_DEFAULTS


def test_nursing_default_and_protocol_category():
    assert respond("code blue in room 4", "nursing").category == "protocol"
    fallback = respond("good morning", "nursing", rng=random.Random(1))
    assert fallback.category == "general"
    assert fallback.content in NURSING_DEFAULTS


def _patient() -> Patient:
    return Patient(
        id="1", name="Sarah Johnson", room="ICU-101", risk_level="critical", acuity_level=5
    )


def _vitals(pain_level: int = 7) -> VitalsSnapshot:
    return VitalsSnapshot(
        temperature=98.6,
        heart_rate=72,
        systolic=120,
        diastolic=80,
        respiratory_rate=16,
        oxygen_saturation=98,
        pain_level=pain_level,
        timestamp=NOW - timedelta(minutes=45),
    )


def _activity() -> list[ActivityLog]:
    return [
        ActivityLog(
            id=str(index),
            timestamp=NOW - timedelta(minutes=30 * index),
            nurse=nurse,
            action=action,
            category="assessment",
        )
        for index, (nurse, action) in enumerate(
            [
                ("Sarah RN", "Updated pain assessment"),
                ("Sarah RN", "Vital signs recorded"),
                ("Michael RN", "Medication administered"),
                ("Jennifer RN", "Wound care"),
            ],
            start=1,
        )
    ]


def test_patient_medications_answer():
    medications = [
        Medication(name="Metoprolol", dosage="25mg", frequency="BID", next_due="2:00 PM"),
        Medication(name="Aspirin", dosage="81mg", frequency="Daily", next_due="8:00 AM"),
    ]
    reply = patient_response("what meds is she on", _patient(), medications=medications)
    assert reply.category == "medication"
    assert reply.content == (
        "Sarah Johnson is currently on 2 medications: Metoprolol 25mg, Aspirin 81mg. "
        "The next medication due is Metoprolol at 2:00 PM."
    )


def test_patient_vitals_answer_uses_elapsed_time():
    reply = patient_response("latest BP?", _patient(), vitals=_vitals(), now=NOW)
    assert reply.category == "medical"
    assert reply.content.startswith("Latest vitals taken 45m ago: Temperature 98.6°F, BP 120/80")


def test_patient_pain_answer_depends_on_level():
    high = patient_response("pain", _patient(), vitals=_vitals(7), activity=_activity())
    assert "may need pain medication" in high.content
    assert high.content.endswith("updated by Sarah RN.")
    low = patient_response("pain", _patient(), vitals=_vitals(3))
    assert "Pain is well controlled." in low.content


def test_patient_activity_answer_lists_three_most_recent():
    reply = patient_response("show the activity", _patient(), activity=_activity())
    assert "Medication administered by Michael RN" in reply.content
    assert "Wound care" not in reply.content


def test_patient_missing_data_and_fallback():
    assert "No vitals" in patient_response("vitals", _patient()).content
    assert "no medications" in patient_response("medication", _patient()).content
    fallback = patient_response("discharge plan", _patient())
    assert fallback.category == "general"
    assert fallback.content.startswith("I can help you with information about Sarah Johnson")
