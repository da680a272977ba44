# 📦 /schemas/assessment.py
# ─────────────────────────────
# Assessment data model: questions, responses, instrument scores, results

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Ordered severity tiers shared by PHQ-9, GAD-7 and the overall risk."""
    MINIMAL = "minimal"
    MILD = "mild"
    MODERATE = "moderate"
    MODERATELY_SEVERE = "moderately-severe"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)


class StressLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class WellBeingLevel(str, Enum):
    POOR = "poor"
    BELOW_AVERAGE = "below-average"
    AVERAGE = "average"
    GOOD = "good"
    EXCELLENT = "excellent"


class QuestionCategory(str, Enum):
    DEPRESSION = "depression"
    ANXIETY = "anxiety"
    STRESS = "stress"
    WELL_BEING = "well-being"
    DEMOGRAPHIC = "demographic"


class ResponseType(str, Enum):
    SCALE = "scale"
    MULTIPLE_CHOICE = "multiple-choice"
    TEXT = "text"
    BOOLEAN = "boolean"


AnswerValue = Union[bool, int, float, str, List[str]]


class AssessmentOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Union[int, str]
    label: str


class AssessmentQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    category: QuestionCategory
    question: str
    type: ResponseType
    options: tuple[AssessmentOption, ...] = ()
    required: bool = True
    help_text: Optional[str] = None
    clinical_context: Optional[str] = None


class AssessmentSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    estimated_minutes: int
    clinical_purpose: str
    questions: tuple[AssessmentQuestion, ...]


class AssessmentResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    value: AnswerValue
    timestamp: datetime


class InstrumentScore(BaseModel):
    """Score, tier, interpretation and recommendations for one instrument."""
    model_config = ConfigDict(frozen=True)

    score: int
    risk_level: str
    interpretation: str
    recommendations: List[str]


class AssessmentScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    phq9: InstrumentScore
    gad7: InstrumentScore
    stress: InstrumentScore
    well_being: InstrumentScore


class AssessmentResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    assessment_id: str
    responses: List[AssessmentResponse]
    scores: AssessmentScores
    risk_level: RiskLevel
    recommendations: List[str]
    completed_at: datetime
    crisis_flagged: bool = False


class AssessmentProgress(BaseModel):
    current_section: int
    total_sections: int
    current_question: int
    total_questions: int
    percent_complete: int
    estimated_time_remaining: int


class TherapistRecommendation(BaseModel):
    specialization: List[str]
    approach_types: List[str]
    urgency: str
    session_frequency: str
    estimated_duration: str
    specific_needs: List[str]


class ProgressIndicators(BaseModel):
    current_depression: str
    current_anxiety: str
    improvement_needed: bool
    strengths: List[str] = Field(default_factory=list)


class AssessmentStats(BaseModel):
    total_assessments: int
    last_assessment: Optional[datetime] = None
    average_phq9_score: float
    average_gad7_score: float
    risk_level_trend: str
    progress_indicators: Optional[ProgressIndicators] = None


class CrisisResource(BaseModel):
    name: str
    phone: str
    text: Optional[str] = None
    website: Optional[str] = None
    available_24h: bool = True
    description: str


class CrisisSupport(BaseModel):
    """Crisis resources shown on the support interstitial, resolved per request."""
    country_code: str
    country_name: str
    emergency: CrisisResource
    suicide: CrisisResource
    crisis: CrisisResource
    additional: List[CrisisResource] = Field(default_factory=list)
