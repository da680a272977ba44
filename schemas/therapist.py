# 📦 /schemas/therapist.py
# ─────────────────────────────
# Therapist roster, client matching input and match output models

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

SessionType = Literal["individual", "couples", "family", "group"]
SeverityLevel = Literal["mild", "moderate", "severe", "crisis"]
LocationPreference = Literal["in_person", "online", "hybrid"]
Gender = Literal["male", "female", "non_binary", "not_specified"]
ServiceMode = Literal["in_person", "online"]


class AvailabilitySlot(BaseModel):
    day: str
    start_time: str
    end_time: str


class HourlyRates(BaseModel):
    individual: float = 0
    couples: float = 0
    family: float = 0
    group: float = 0


class BudgetRange(BaseModel):
    min: float
    max: float


class TherapistProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    full_name: str
    gender: Gender = "not_specified"
    license_type: str = ""
    years_experience: int = 0
    years_private_practice: Optional[int] = None
    specializations: List[str] = []
    therapy_approaches: List[str] = []
    client_demographics: List[str] = []
    severity_levels: List[str] = []
    crisis_intervention_trained: bool = False
    trauma_informed_certified: bool = False
    languages: List[str] = []
    availability_slots: List[AvailabilitySlot] = []
    session_durations: List[int] = []
    hourly_rates: HourlyRates = Field(default_factory=HourlyRates)
    sliding_scale_available: bool = False
    insurance_accepted: List[str] = []
    location: str = ""
    services_offered: List[ServiceMode] = ["in_person", "online"]
    emergency_availability: bool = False


class ClientAssessment(BaseModel):
    """Normalized matching input derived from a completed assessment."""
    model_config = ConfigDict(frozen=True)

    age_group: str = "adult"
    relationship_status: str = "unknown"
    therapy_experience: str = "never"
    therapy_preference: str = "no_preference"
    primary_concern: str = "general"
    severity_level: SeverityLevel = "mild"
    preferred_session_type: SessionType = "individual"
    insurance_provider: Optional[str] = None
    budget_range: Optional[BudgetRange] = None
    preferred_languages: List[str] = []
    preferred_schedule: List[str] = []
    location_preference: LocationPreference = "hybrid"
    crisis_history: bool = False
    trauma_history: bool = False


class MatchingPreferences(BaseModel):
    """Optional user-supplied preferences layered over an assessment."""
    preferred_session_type: Optional[SessionType] = None
    insurance_provider: Optional[str] = None
    budget_range: Optional[BudgetRange] = None
    preferred_languages: Optional[List[str]] = None
    preferred_schedule: Optional[List[str]] = None
    location_preference: Optional[LocationPreference] = None


class MatchBreakdown(BaseModel):
    specialization_match: float
    experience_match: float
    approach_match: float
    availability_match: float
    cost_match: float
    preference_match: float
    crisis_readiness: float


class MatchScore(BaseModel):
    therapist_id: str
    total_score: float
    breakdown: MatchBreakdown
    compatibility_reasons: List[str] = []
    potential_concerns: List[str] = []

    @property
    def displayed_score(self) -> float:
        return round(self.total_score, 2)

    @field_serializer("total_score")
    def _round_total(self, value: float) -> float:
        return round(value, 2)


class PriceRange(BaseModel):
    min: float
    max: float


class TherapistSearchFilters(BaseModel):
    specializations: List[str] = []
    languages: List[str] = []
    price_range: Optional[PriceRange] = None
    session_type: SessionType = "individual"
    availability: List[str] = []
    insurance_accepted: List[str] = []
    services_offered: List[ServiceMode] = []
    gender: Optional[str] = None
    search_query: Optional[str] = None


class TherapistListingResults(BaseModel):
    recommended: List[TherapistProfile]
    other: List[TherapistProfile]
    total_count: int
    match_scores: Dict[str, MatchScore] = {}
