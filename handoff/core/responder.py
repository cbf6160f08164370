from __future__ import annotations

import random
from datetime import datetime
from typing import NamedTuple

from handoff.core.status import time_ago
from handoff.models.chat import ChatReply, ResponseCategory
from handoff.models.patient import ActivityLog, Medication, Patient, VitalsSnapshot


class ResponseRule(NamedTuple):
    """키워드 응답 규칙"""

    trigger: str
    response: str
    category: ResponseCategory


def _rules(*groups: tuple[tuple[str, ...], str, ResponseCategory]) -> tuple[ResponseRule, ...]:
    """트리거 묶음을 순서가 유지되는 규칙 목록으로 펼침"""
    return tuple(
        ResponseRule(trigger, response, category)
        for triggers, response, category in groups
        for trigger in triggers
    )


GENERAL_RULES = _rules(
    (
        ("blood pressure", "hypertension"),
        "Normal blood pressure is typically less than 120/80 mmHg. For hypertensive patients, "
        "monitor closely and ensure medications are administered as prescribed. Consider "
        "lifestyle factors and report significant changes to the physician.",
        "medical",
    ),
    (
        ("pain", "pain scale"),
        "Use the 0-10 pain scale for assessment. Document pain location, quality, and factors "
        "that worsen/improve it. Non-pharmacological interventions include positioning, "
        "ice/heat, and distraction techniques. Always reassess after interventions.",
        "medical",
    ),
    (
        ("medication", "drug"),
        "Always follow the 5 rights of medication administration: Right patient, right drug, "
        "right dose, right route, right time. Check for allergies, verify orders, and document "
        "administration. Report any adverse reactions immediately.",
        "medication",
    ),
    (
        ("handoff", "shift change"),
        "Effective handoffs include: Patient identification, current condition, recent "
        "changes, pending orders, safety concerns, and family updates. Use SBAR format: "
        "Situation, Background, Assessment, Recommendation.",
        "procedure",
    ),
    (
        ("infection control", "ppe"),
        "Standard precautions apply to all patients. Use appropriate PPE based on transmission "
        "risk. Hand hygiene is crucial - wash hands before and after patient contact. Follow "
        "isolation protocols as ordered.",
        "procedure",
    ),
    (
        ("fall risk", "safety"),
        "Assess fall risk using validated tools. Implement appropriate interventions: bed "
        "alarms, non-slip socks, adequate lighting, clear pathways. Educate patients about "
        "calling for assistance.",
        "medical",
    ),
)

GENERAL_DEFAULTS = (
    "I can help you with medical procedures, medication information, patient care "
    "guidelines, and shift management. What specific topic would you like to discuss?",
    "For specific patient care questions, please consult your facility's protocols or speak "
    "with the attending physician. I can provide general nursing guidance.",
    "Remember to always follow your institution's policies and procedures. I'm here to "
    "provide general support and information.",
)

NURSING_RULES = _rules(
    (
        ("calculate", "dose", "drip rate"),
        "I can help with common nursing calculations:\n"
        "• IV drip rates: (Volume × Drop factor) ÷ Time in minutes\n"
        "• Medication dosages: (Desired dose ÷ Available dose) × Quantity\n"
        "• Body surface area calculations\n"
        "• Unit conversions\n\n"
        "What specific calculation do you need help with?",
        "medical",
    ),
    (
        ("pain", "pain scale"),
        "Pain Assessment Guidelines:\n"
        "• Use 0-10 numeric scale for adults\n"
        "• FACES scale for pediatric patients\n"
        "• Document: Location, quality, intensity, duration\n"
        "• Reassess 30-60 minutes after intervention\n"
        "• Non-pharmacological options: positioning, heat/cold, distraction\n"
        "• Always believe the patient's report of pain",
        "medical",
    ),
    (
        ("vital", "blood pressure", "temperature"),
        "Normal Adult Vital Signs:\n"
        "• Temperature: 97-99°F (36.1-37.2°C)\n"
        "• Heart Rate: 60-100 bpm\n"
        "• Respiratory Rate: 12-20 breaths/min\n"
        "• Blood Pressure: <120/80 mmHg\n"
        "• O2 Saturation: >95%\n\n"
        "Report immediately if outside normal ranges or significant changes from baseline.",
        "medical",
    ),
    (
        ("medication", "drug", "5 rights"),
        "5 Rights of Medication Administration:\n"
        "1. Right Patient - Check ID band\n"
        "2. Right Drug - Verify medication name\n"
        "3. Right Dose - Check calculation\n"
        "4. Right Route - Confirm administration method\n"
        "5. Right Time - Verify schedule\n\n"
        "Additional: Right documentation, right reason, right response. "
        "Always check allergies first!",
        "medication",
    ),
    (
        ("infection", "ppe", "isolation"),
        "Infection Control Precautions:\n"
        "• Standard: All patients (hand hygiene, gloves when indicated)\n"
        "• Contact: Gown + gloves (C. diff, MRSA, VRE)\n"
        "• Droplet: Surgical mask within 3 feet (flu, pertussis)\n"
        "• Airborne: N95 mask (TB, measles, varicella)\n\n"
        "Hand hygiene before and after every patient contact!",
        "protocol",
    ),
    (
        ("fall", "safety"),
        "Fall Prevention Strategies:\n"
        "• Assess fall risk on admission and daily\n"
        "• Keep bed in lowest position\n"
        "• Ensure call light within reach\n"
        "• Non-slip socks for ambulatory patients\n"
        "• Clear pathways, adequate lighting\n"
        "• Toileting schedule for high-risk patients\n"
        "• Consider bed/chair alarms if appropriate",
        "protocol",
    ),
    (
        ("emergency", "code", "cardiac arrest"),
        "Emergency Response:\n"
        "• Call for help immediately\n"
        "• Start CPR if no pulse (30:2 ratio)\n"
        "• Apply AED if available\n"
        "• Prepare for advanced life support\n"
        "• Document time of events\n"
        "• Notify physician and family\n\n"
        "Remember: Your safety first, then patient care.",
        "protocol",
    ),
    (
        ("wound", "dressing", "pressure ulcer"),
        "Wound Assessment & Care:\n"
        "• Document: Size, depth, drainage, odor, surrounding skin\n"
        "• Clean technique for chronic wounds\n"
        "• Sterile technique for acute/surgical wounds\n"
        "• Pressure ulcer staging: I-IV, unstageable, suspected deep tissue\n"
        "• Turn/reposition every 2 hours\n"
        "• Keep wound bed moist, surrounding skin dry",
        "procedure",
    ),
)

NURSING_DEFAULTS = (
    "I can help you with:\n"
    "• Medical protocols and procedures\n"
    "• Medication calculations and guidelines\n"
    "• Patient safety measures\n"
    "• Emergency procedures\n"
    "• Documentation requirements\n\n"
    "What specific topic interests you?",
    "Need quick help? Try asking about:\n"
    "• Pain assessment\n"
    "• Vital signs ranges\n"
    "• Infection control\n"
    "• Fall prevention\n"
    "• Medication administration\n"
    "• Wound care basics",
    "I'm here to support your nursing practice with evidence-based information. Remember to "
    "always follow your facility's specific policies and consult with physicians for "
    "patient-specific decisions.",
)

RULEBOOKS: dict[str, tuple[tuple[ResponseRule, ...], tuple[str, ...]]] = {
    "general": (GENERAL_RULES, GENERAL_DEFAULTS),
    "nursing": (NURSING_RULES, NURSING_DEFAULTS),
}


def lookup_response(
    text: str,
    rules: tuple[ResponseRule, ...] = GENERAL_RULES,
    defaults: tuple[str, ...] = GENERAL_DEFAULTS,
    rng: random.Random | None = None,
) -> ChatReply:
    """입력 문장에 대한 고정 응답을 조회

    규칙 순서대로 트리거를 대소문자 구분 없이 부분 문자열로 검사하고
    처음 일치한 규칙을 반환한다. 일치하는 규칙이 없으면 기본 응답 중 하나를 고른다.

    Args:
        text: 사용자 입력
        rules: 순서가 있는 규칙 목록
        defaults: 기본 응답 목록
        rng: 기본 응답 선택에 사용할 난수 생성기

    Returns:
        응답 내용과 분류
    """
    message = text.lower()
    for rule in rules:
        if rule.trigger in message:
            return ChatReply(content=rule.response, category=rule.category)
    chooser = rng or random
    return ChatReply(content=chooser.choice(defaults), category="general")


def respond(text: str, assistant: str = "general", rng: random.Random | None = None) -> ChatReply:
    """규칙 세트 이름으로 응답을 조회

    Args:
        text: 사용자 입력
        assistant: "general" 또는 "nursing"
        rng: 난수 생성기

    Returns:
        응답 내용과 분류
    """
    rules, defaults = RULEBOOKS[assistant]
    return lookup_response(text, rules, defaults, rng)


PATIENT_TOPICS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("medication", "med"), "medications"),
    (("vital", "bp", "temperature"), "vitals"),
    (("pain",), "pain"),
    (("activity", "log"), "activity"),
    (("hello", "hi"), "greeting"),
)


def _medications_answer(name: str, medications: list[Medication]) -> str:
    if not medications:
        return f"{name} has no medications on record."
    listed = ", ".join(f"{med.name} {med.dosage}" for med in medications)
    first = medications[0]
    return (
        f"{name} is currently on {len(medications)} medications: {listed}. "
        f"The next medication due is {first.name} at {first.next_due}."
    )


def _vitals_answer(name: str, vitals: VitalsSnapshot | None, now: datetime | None) -> str:
    if vitals is None:
        return f"No vitals have been recorded for {name} yet."
    return (
        f"Latest vitals taken {time_ago(vitals.timestamp, now)}: "
        f"Temperature {vitals.temperature}°F, BP {vitals.systolic}/{vitals.diastolic}, "
        f"HR {vitals.heart_rate}, RR {vitals.respiratory_rate}, "
        f"O2 Sat {vitals.oxygen_saturation}%, Pain {vitals.pain_level}/10."
    )


def _pain_answer(vitals: VitalsSnapshot | None, activity: list[ActivityLog]) -> str:
    pain = vitals.pain_level if vitals is not None else 0
    advice = (
        "Patient may need pain medication as ordered." if pain > 5 else "Pain is well controlled."
    )
    answer = f"Current pain level is {pain}/10. {advice}"
    if activity:
        answer += f" Last pain assessment was updated by {activity[0].nurse}."
    return answer


def _activity_answer(activity: list[ActivityLog]) -> str:
    if not activity:
        return "No activities have been logged yet."
    recent = ", ".join(f"{log.action} by {log.nurse}" for log in activity[:3])
    return f"Recent activities: {recent}. Check the activity log tab for complete details."


def patient_response(
    text: str,
    patient: Patient,
    vitals: VitalsSnapshot | None = None,
    medications: list[Medication] | None = None,
    activity: list[ActivityLog] | None = None,
    now: datetime | None = None,
) -> ChatReply:
    """환자 한 명의 기록으로 질문에 답변

    주제 트리거는 일반 규칙과 같은 방식(소문자 부분 문자열, 먼저 일치한 주제 우선)으로
    검사하고, 응답 문장은 해당 환자의 투약/활력징후/활동 기록으로 채운다.

    Args:
        text: 사용자 입력
        patient: 환자
        vitals: 최근 활력징후
        medications: 투약 목록
        activity: 최신순 활동 기록
        now: 경과 시간 계산 기준 시각

    Returns:
        응답 내용과 분류
    """
    message = text.lower()
    medications = medications or []
    activity = activity or []
    topic = next(
        (topic for triggers, topic in PATIENT_TOPICS if any(t in message for t in triggers)),
        None,
    )
    if topic == "medications":
        return ChatReply(
            content=_medications_answer(patient.name, medications), category="medication"
        )
    if topic == "vitals":
        return ChatReply(content=_vitals_answer(patient.name, vitals, now), category="medical")
    if topic == "pain":
        return ChatReply(content=_pain_answer(vitals, activity), category="medical")
    if topic == "activity":
        return ChatReply(content=_activity_answer(activity), category="general")
    if topic == "greeting":
        return ChatReply(
            content=(
                f"Hello! I'm here to help you with information about {patient.name}. You can "
                "ask me about medications, vitals, recent activities, pain levels, or any "
                "other patient information."
            ),
            category="general",
        )
    return ChatReply(
        content=(
            f"I can help you with information about {patient.name}. Try asking about "
            "medications, vitals, recent activities, pain assessment, or nursing notes."
        ),
        category="general",
    )
