# 📦 /schemas/schemas.py
# ─────────────────────────────
# Request / response envelopes for the HTTP API

from pydantic import BaseModel
from typing import List, Optional

from schemas.assessment import (
    AssessmentResponse,
    AssessmentResult,
    AssessmentSection,
    AssessmentStats,
    CrisisSupport,
    TherapistRecommendation,
)
from schemas.therapist import (
    ClientAssessment,
    MatchingPreferences,
    MatchScore,
    TherapistListingResults,
    TherapistSearchFilters,
)


class ScoreRequest(BaseModel):
    user_id: str
    assessment_id: Optional[str] = None
    responses: List[AssessmentResponse]


class AssessmentEnvelope(BaseModel):
    status: str
    data: AssessmentResult
    saved: bool = False
    crisis_support: Optional[CrisisSupport] = None
    message: Optional[str] = None


class SectionsResponse(BaseModel):
    status: str
    data: List[AssessmentSection]


class StatsResponse(BaseModel):
    status: str
    data: AssessmentStats


class RecommendationProfileResponse(BaseModel):
    status: str
    data: TherapistRecommendation


class RecommendRequest(BaseModel):
    client: ClientAssessment
    top_n: Optional[int] = None


class PreferencesRequest(BaseModel):
    preferences: Optional[MatchingPreferences] = None
    top_n: Optional[int] = None


class RecommendResponse(BaseModel):
    status: str
    data: List[MatchScore]


class ListingRequest(BaseModel):
    client: Optional[ClientAssessment] = None
    filters: TherapistSearchFilters = TherapistSearchFilters()


class ListingResponse(BaseModel):
    status: str
    data: TherapistListingResults


class HealthCheckResponse(BaseModel):
    status: str
    message: str
    version: str


class ErrorResponse(BaseModel):
    status: str
    message: str
    info: Optional[str | dict] = None
