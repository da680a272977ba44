# 📦 engine/scoring.py
# ─────────────────────────────
# Clinical scoring for PHQ-9, GAD-7, PSS and WHO-5 plus result aggregation
#
# Missing or non-numeric items count as 0. Tier tables hold the published
# cutoffs as (highest score in band, tier, interpretation, recommendations).

import math
import uuid
from typing import Optional

import structlog

from engine.questions import (
    GAD7_IDS,
    PHQ9_IDS,
    PRIMARY_CONCERN_ITEM,
    PSS_IDS,
    SUICIDAL_IDEATION_ITEM,
    WHO5_IDS,
    get_question,
)
from engine.responses import as_view
from schemas.assessment import (
    AssessmentResponse,
    AssessmentResult,
    AssessmentScores,
    InstrumentScore,
    RiskLevel,
    StressLevel,
    WellBeingLevel,
)

log = structlog.get_logger()

PHQ9_TIERS = [
    (4, RiskLevel.MINIMAL,
     "Minimal depression symptoms. You appear to be experiencing very few or no symptoms of depression.",
     ["Continue current wellness practices",
      "Consider preventive mental health strategies",
      "Regular self-care and stress management"]),
    (9, RiskLevel.MILD,
     "Mild depression symptoms. You may be experiencing some symptoms that could benefit from attention.",
     ["Consider lifestyle changes (exercise, sleep hygiene, social connection)",
      "Mindfulness and stress reduction techniques",
      "Monitor symptoms and consider counseling if they persist or worsen"]),
    (14, RiskLevel.MODERATE,
     "Moderate depression symptoms. Your symptoms are interfering with your daily life and well-being.",
     ["Professional counseling or therapy is recommended",
      "Consider cognitive-behavioral therapy (CBT)",
      "Discuss symptoms with your healthcare provider",
      "Maintain social connections and support systems"]),
    (19, RiskLevel.MODERATELY_SEVERE,
     "Moderately severe depression symptoms. You are experiencing significant symptoms that require professional attention.",
     ["Professional mental health treatment is strongly recommended",
      "Consider both therapy and medication evaluation",
      "Regular monitoring by mental health professional",
      "Crisis support plan may be beneficial"]),
    (27, RiskLevel.SEVERE,
     "Severe depression symptoms. You are experiencing significant symptoms that require immediate professional attention.",
     ["Immediate professional mental health evaluation recommended.",
      "Consider urgent care or emergency services if having thoughts of self-harm",
      "Medication evaluation likely needed",
      "Intensive therapeutic support recommended"]),
]

GAD7_TIERS = [
    (4, RiskLevel.MINIMAL,
     "Minimal anxiety symptoms. You appear to be experiencing very few anxiety-related concerns.",
     ["Continue current stress management practices",
      "Regular relaxation and mindfulness techniques",
      "Maintain healthy lifestyle habits"]),
    (9, RiskLevel.MILD,
     "Mild anxiety symptoms. You may be experiencing some worry or anxiety that could benefit from attention.",
     ["Learn and practice anxiety management techniques",
      "Deep breathing, progressive muscle relaxation",
      "Consider mindfulness-based stress reduction",
      "Monitor triggers and patterns"]),
    (14, RiskLevel.MODERATE,
     "Moderate anxiety symptoms. Your anxiety is likely interfering with your daily activities and well-being.",
     ["Professional counseling for anxiety management is recommended",
      "Cognitive-behavioral therapy (CBT) for anxiety",
      "Consider anxiety support groups",
      "Discuss symptoms with healthcare provider"]),
    (21, RiskLevel.SEVERE,
     "Severe anxiety symptoms. You are experiencing significant anxiety that requires professional attention.",
     ["Professional mental health treatment is strongly recommended",
      "Consider both therapy and medication evaluation",
      "Specialized anxiety treatment programs",
      "Crisis support resources for severe anxiety episodes"]),
]

STRESS_TIERS = [
    (7, StressLevel.LOW,
     "Low stress levels. You appear to be managing life's challenges well.",
     ["Continue current coping strategies",
      "Maintain work-life balance",
      "Regular self-care practices"]),
    (14, StressLevel.MODERATE,
     "Moderate stress levels. You may benefit from additional stress management techniques.",
     ["Develop stronger stress management skills",
      "Consider stress reduction workshops or apps",
      "Time management and organization strategies",
      "Regular exercise and relaxation"]),
    (20, StressLevel.HIGH,
     "High stress levels. Your stress levels may be impacting your health and well-being significantly.",
     ["Professional support for stress management is recommended",
      "Consider counseling for stress-related concerns",
      "Evaluate major life stressors and potential changes",
      "Medical evaluation for stress-related health impacts"]),
]

# WHO-5 bands on the 0-100 percentage score: <28, <52, <68, <84, rest
WELL_BEING_TIERS = [
    (27, WellBeingLevel.POOR,
     "Poor well-being. You may be experiencing significant challenges with your overall well-being and quality of life.",
     ["Professional mental health evaluation is recommended",
      "Focus on basic self-care and daily structure",
      "Consider comprehensive mental health support",
      "Screen for depression and other mental health conditions"]),
    (51, WellBeingLevel.BELOW_AVERAGE,
     "Below-average well-being. There are areas of your life and mood that could benefit from attention and improvement.",
     ["Consider counseling to improve overall well-being",
      "Focus on activities that bring joy and meaning",
      "Strengthen social connections and support systems",
      "Develop healthy routines and habits"]),
    (67, WellBeingLevel.AVERAGE,
     "Average well-being. You have a moderate sense of well-being with room for growth and improvement.",
     ["Continue positive practices that support well-being",
      "Consider areas for personal growth and development",
      "Maintain social connections and meaningful activities",
      "Regular self-reflection and goal-setting"]),
    (83, WellBeingLevel.GOOD,
     "Good well-being. You have a strong sense of overall well-being and life satisfaction.",
     ["Continue current practices that support your well-being",
      "Consider helping others or community involvement",
      "Maintain balance and prevent burnout",
      "Regular wellness check-ins and self-care"]),
    (100, WellBeingLevel.EXCELLENT,
     "Excellent well-being. You have very strong overall well-being and life satisfaction.",
     ["Continue excellent self-care and life management",
      "Consider mentoring others or sharing your strategies",
      "Maintain current positive practices",
      "Stay vigilant for life changes that might impact well-being"]),
]

FALLBACK_RECOMMENDATIONS = [
    "Regular self-care and stress management",
    "Maintain social connections and support systems",
    "Consider speaking with a mental health professional",
]


# ─────────────────────────────
# Item access

def response_value(responses, question_id):
    """Raw answer for a question, unwrapping response records and dicts."""
    entry = as_view(responses).get(question_id)
    if entry is None:
        return None
    if isinstance(entry, dict):
        return entry.get("value")
    return getattr(entry, "value", entry)


def item_score(responses, question_id) -> int:
    """Numeric item value clamped to the item's option range.

    Missing or non-numeric answers count as 0.
    """
    value = response_value(responses, question_id)
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            log.warning("Non-numeric answer on scale item", question_id=question_id)
            return 0
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return max(0, min(int(value), _item_ceiling(question_id)))


def _item_ceiling(question_id):
    question = get_question(question_id)
    numeric = [o.value for o in question.options if isinstance(o.value, int)] if question else []
    return max(numeric) if numeric else 0


def _sum_items(responses, question_ids):
    view = as_view(responses)
    return sum(item_score(view, qid) for qid in question_ids)


def _classify(score, tiers):
    for upper, level, interpretation, recommendations in tiers:
        if score <= upper:
            break
    return InstrumentScore(
        score=score,
        risk_level=level.value,
        interpretation=interpretation,
        recommendations=list(recommendations),
    )


# ─────────────────────────────
# Instruments

def score_phq9(responses) -> InstrumentScore:
    """PHQ-9 depression severity, 0-27."""
    return _classify(_sum_items(responses, PHQ9_IDS), PHQ9_TIERS)


def score_gad7(responses) -> InstrumentScore:
    """GAD-7 anxiety severity, 0-21."""
    return _classify(_sum_items(responses, GAD7_IDS), GAD7_TIERS)


def score_stress(responses) -> InstrumentScore:
    """Perceived stress, 0-20. Reverse items are already inverted in their options."""
    return _classify(_sum_items(responses, PSS_IDS), STRESS_TIERS)


def score_well_being(responses) -> InstrumentScore:
    """WHO-5 well-being: raw 0-25 sum times 4, giving 0-100."""
    return _classify(_sum_items(responses, WHO5_IDS) * 4, WELL_BEING_TIERS)


# ─────────────────────────────
# Aggregation

def to_risk_level(tier) -> RiskLevel:
    """Parse a tier name; unknown tiers degrade to minimal."""
    if isinstance(tier, RiskLevel):
        return tier
    try:
        return RiskLevel(tier)
    except ValueError:
        log.warning("Unrecognized risk tier, treating as minimal", tier=tier)
        return RiskLevel.MINIMAL


def determine_overall_risk(depression_tier, anxiety_tier) -> RiskLevel:
    """The more severe of the PHQ-9 and GAD-7 tiers."""
    return max(to_risk_level(depression_tier), to_risk_level(anxiety_tier), key=lambda level: level.rank)


def suicidal_ideation_indicated(responses) -> bool:
    return item_score(responses, SUICIDAL_IDEATION_ITEM) > 0


def primary_concern(responses) -> Optional[str]:
    value = response_value(responses, PRIMARY_CONCERN_ITEM)
    if value is None or value == "":
        return None
    return str(value)


def generate_recommendations(phq9, gad7, stress, well_being, concern=None):
    recommendations = []
    for instrument in (phq9, gad7, stress, well_being):
        for line in instrument.recommendations:
            if line not in recommendations:
                recommendations.append(line)

    if concern:
        recommendations.append(f"Connect with a therapist who specializes in {concern.replace('_', ' ')}")

    if not recommendations:
        return list(FALLBACK_RECOMMENDATIONS)
    return recommendations


def _recorded_responses(view, fallback_time=None):
    """Responses as recorded answers; bare values take ``fallback_time`` as their timestamp."""
    recorded = []
    for question_id, entry in view.items():
        if isinstance(entry, AssessmentResponse):
            recorded.append(entry)
            continue
        if isinstance(entry, dict):
            value, timestamp = entry.get("value"), entry.get("timestamp")
        else:
            value, timestamp = entry, None
        timestamp = timestamp or fallback_time
        if value is not None and timestamp is not None:
            recorded.append(AssessmentResponse(question_id=question_id, value=value, timestamp=timestamp))
    return recorded


def score_assessment(responses, user_id, assessment_id=None, completed_at=None) -> AssessmentResult:
    """Score a completed response set into an AssessmentResult.

    ``completed_at`` defaults to the latest response timestamp so that
    rescoring the same responses yields an identical result.
    """
    view = as_view(responses)

    phq9 = score_phq9(view)
    gad7 = score_gad7(view)
    stress = score_stress(view)
    well_being = score_well_being(view)

    if completed_at is None:
        timestamped = _recorded_responses(view)
        if not timestamped:
            raise ValueError("completed_at is required when no response carries a timestamp")
        completed_at = max(r.timestamp for r in timestamped)
    answered = _recorded_responses(view, fallback_time=completed_at)

    crisis = suicidal_ideation_indicated(view)
    if crisis:
        log.warning("Suicidal ideation item positive", user_id=user_id, requires_followup=True)

    return AssessmentResult(
        user_id=user_id,
        assessment_id=assessment_id or str(uuid.uuid4()),
        responses=answered,
        scores=AssessmentScores(phq9=phq9, gad7=gad7, stress=stress, well_being=well_being),
        risk_level=determine_overall_risk(phq9.risk_level, gad7.risk_level),
        recommendations=generate_recommendations(phq9, gad7, stress, well_being, primary_concern(view)),
        completed_at=completed_at,
        crisis_flagged=crisis,
    )
