# 📦 engine/client_profile.py
# ─────────────────────────────
# Normalize a stored assessment (plus optional preferences) into matching input

from engine.responses import ResponseLog
from engine.scoring import primary_concern, response_value, suicidal_ideation_indicated
from schemas.assessment import RiskLevel
from schemas.therapist import ClientAssessment

DEFAULT_LANGUAGES = ["English"]

# PSS sits on a 0-20 scale; weight it down before comparing with PHQ-9 / GAD-7
PSS_SEVERITY_FACTOR = 0.4


def severity_from_scores(scores):
    peak = max(scores.phq9.score, scores.gad7.score, scores.stress.score * PSS_SEVERITY_FACTOR)
    if peak >= 20:
        return "crisis"
    if peak >= 15:
        return "severe"
    if peak >= 10:
        return "moderate"
    return "mild"


def _answer(responses, question_id, default):
    value = response_value(responses, question_id)
    if value is None or value == "":
        return default
    return str(value)


def build_client_assessment(result, preferences=None) -> ClientAssessment:
    """ClientAssessment for one AssessmentResult."""
    responses = ResponseLog(result.responses)
    concern = primary_concern(responses) or "general"
    severity = severity_from_scores(result.scores)

    profile = {
        "age_group": _answer(responses, "age_group", "adult"),
        "relationship_status": _answer(responses, "relationship_status", "unknown"),
        "therapy_experience": _answer(responses, "therapy_experience", "never"),
        "therapy_preference": _answer(responses, "therapy_preference", "no_preference"),
        "primary_concern": concern,
        "severity_level": severity,
        "preferred_languages": list(DEFAULT_LANGUAGES),
        "crisis_history": (
            severity == "crisis"
            or result.risk_level == RiskLevel.SEVERE
            or suicidal_ideation_indicated(responses)
        ),
        "trauma_history": "trauma" in concern.lower() or "ptsd" in concern.lower(),
    }

    if preferences is not None:
        profile.update(preferences.model_dump(exclude_none=True))

    return ClientAssessment(**profile)
