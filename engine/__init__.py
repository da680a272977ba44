# engine/__init__.py
# ─────────────────────────────
# Init file for the Govently Match engine package
# Exposes core components

from .scoring import (
    determine_overall_risk,
    score_assessment,
    score_gad7,
    score_phq9,
    score_stress,
    score_well_being,
)
from .features import build_breakdown
from .matcher import Matcher, find_matches
from .filters import apply_all_filters, partition_listing
from .recommendation import build_recommendation_profile
from .client_profile import build_client_assessment
from .flow import AssessmentSession

__all__ = [
    "determine_overall_risk",
    "score_assessment",
    "score_gad7",
    "score_phq9",
    "score_stress",
    "score_well_being",
    "build_breakdown",
    "Matcher",
    "find_matches",
    "apply_all_filters",
    "partition_listing",
    "build_recommendation_profile",
    "build_client_assessment",
    "AssessmentSession",
]
