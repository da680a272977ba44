# 📦 engine/recommendation.py
# ─────────────────────────────
# Roster-independent recommendation profile derived from one assessment

from engine.questions import CONCENTRATION_ITEM, SLEEP_ITEM
from engine.scoring import item_score, primary_concern, suicidal_ideation_indicated, to_risk_level
from engine.responses import ResponseLog
from schemas.assessment import RiskLevel, TherapistRecommendation

URGENCY = {
    RiskLevel.SEVERE: "immediate",
    RiskLevel.MODERATELY_SEVERE: "immediate",
    RiskLevel.MODERATE: "urgent",
}

SESSION_FREQUENCY = {
    RiskLevel.SEVERE: "weekly",
    RiskLevel.MODERATELY_SEVERE: "weekly",
    RiskLevel.MODERATE: "bi-weekly",
}

TREATMENT_DURATION = {
    RiskLevel.SEVERE: "6-12 months",
    RiskLevel.MODERATELY_SEVERE: "4-8 months",
    RiskLevel.MODERATE: "2-6 months",
}

CONCERN_SPECIALIZATIONS = {
    "relationships": ["Relationship Counseling", "Communication Skills"],
    "trauma": ["Trauma Therapy", "PTSD Treatment"],
    "life-changes": ["Life Transitions", "Adjustment Disorders"],
    "life_transitions": ["Life Transitions", "Adjustment Disorders"],
}

CONCERN_APPROACHES = {
    "trauma": ["EMDR", "Trauma-Focused CBT"],
    "relationships": ["Emotionally Focused Therapy (EFT)", "Gottman Method"],
}


def _unique(items):
    return list(dict.fromkeys(items))


def recommended_specializations(result):
    scores = result.scores
    specializations = []

    if scores.phq9.score >= 10:
        specializations += ["Depression", "Mood Disorders"]
    if scores.gad7.score >= 10:
        specializations += ["Anxiety Disorders", "Generalized Anxiety"]
    if scores.stress.score >= 14:
        specializations += ["Stress Management", "Burnout Prevention"]
    if scores.well_being.score < 50:
        specializations += ["Life Transitions", "Self-Esteem"]

    concern = primary_concern(ResponseLog(result.responses))
    specializations += CONCERN_SPECIALIZATIONS.get(concern, [])

    return _unique(specializations)


def recommended_approaches(result):
    scores = result.scores
    approaches = ["Cognitive Behavioral Therapy (CBT)"]

    if scores.phq9.score >= 15 or scores.gad7.score >= 15:
        approaches += ["Dialectical Behavior Therapy (DBT)", "Acceptance and Commitment Therapy (ACT)"]
    if scores.stress.score >= 14:
        approaches += ["Mindfulness-Based Stress Reduction", "Relaxation Training"]

    concern = primary_concern(ResponseLog(result.responses))
    approaches += CONCERN_APPROACHES.get(concern, [])

    return _unique(approaches)


def specific_needs(result):
    responses = ResponseLog(result.responses)
    needs = []

    if suicidal_ideation_indicated(responses):
        needs += ["Crisis intervention", "Safety planning", "Risk assessment"]
    if item_score(responses, SLEEP_ITEM) >= 2:
        needs.append("Sleep hygiene counseling")
    if item_score(responses, CONCENTRATION_ITEM) >= 2:
        needs.append("Cognitive enhancement techniques")
    if result.scores.gad7.score >= 10:
        needs += ["Anxiety management techniques", "Relaxation training"]

    return _unique(needs)


def build_recommendation_profile(result) -> TherapistRecommendation:
    """Specializations, approaches, urgency and cadence for one assessment."""
    risk = to_risk_level(result.risk_level)
    return TherapistRecommendation(
        specialization=recommended_specializations(result),
        approach_types=recommended_approaches(result),
        urgency=URGENCY.get(risk, "routine"),
        session_frequency=SESSION_FREQUENCY.get(risk, "monthly"),
        estimated_duration=TREATMENT_DURATION.get(risk, "1-3 months"),
        specific_needs=specific_needs(result),
    )
