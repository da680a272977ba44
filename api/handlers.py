from fastapi import APIRouter
from fastapi.responses import JSONResponse
from schemas.schemas import (
    AssessmentEnvelope,
    ErrorResponse,
    HealthCheckResponse,
    ListingRequest,
    ListingResponse,
    PreferencesRequest,
    RecommendationProfileResponse,
    RecommendRequest,
    RecommendResponse,
    ScoreRequest,
    SectionsResponse,
    StatsResponse,
)
from services.assessment_service import (
    complete_assessment,
    get_assessment_by_id,
    get_assessment_stats,
    get_current_assessment,
)
from services.matcher_service import (
    run_listing,
    run_matcher,
    run_matcher_for_user,
    REQUEST_COUNTER,
)
from engine.flow import load_crisis_support
from engine.questions import ASSESSMENT_SECTIONS
from engine.recommendation import build_recommendation_profile
from engine.scoring import score_assessment
import structlog

log = structlog.get_logger()

router = APIRouter()

# Therapist roster, replaced at startup
THERAPISTS = []

CRISIS_SUPPORT = load_crisis_support()

VERSION = "1.0.0"


def _error(status_code, message, info=None):
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(status="error", message=message, info=info).model_dump(),
    )


def _envelope(result, saved, status="success", message=None):
    return AssessmentEnvelope(
        status=status,
        data=result,
        saved=saved,
        crisis_support=CRISIS_SUPPORT if result.crisis_flagged else None,
        message=message,
    )


def _score(request: ScoreRequest):
    return score_assessment(
        request.responses,
        user_id=request.user_id,
        assessment_id=request.assessment_id,
    )


@router.get("/", response_model=HealthCheckResponse)
async def healthcheck():
    return JSONResponse(content=HealthCheckResponse(
        status="ok",
        message="Govently matching engine live",
        version=VERSION
    ).model_dump())

# ─────────────────────────────
# Assessment

@router.get("/assessment/sections", response_model=SectionsResponse)
async def assessment_sections():
    return SectionsResponse(status="success", data=list(ASSESSMENT_SECTIONS))


@router.post("/assessment/score", response_model=AssessmentEnvelope, responses={422: {"model": ErrorResponse}})
async def score(request: ScoreRequest):
    if not request.responses:
        return _error(422, "At least one response is required.")
    return _envelope(_score(request), saved=False)


@router.post("/assessment/complete", response_model=AssessmentEnvelope, responses={422: {"model": ErrorResponse}})
async def complete(request: ScoreRequest):
    if not request.responses:
        return _error(422, "At least one response is required.")

    result, saved = await complete_assessment(
        request.user_id,
        request.responses,
        assessment_id=request.assessment_id,
    )
    if not saved:
        return _envelope(result, saved=False, status="partial", message="Assessment scored but could not be saved.")
    return _envelope(result, saved=True)


@router.get("/assessment/current/{user_id}", response_model=AssessmentEnvelope, responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def current_assessment(user_id: str):
    try:
        result = await get_current_assessment(user_id)
    except Exception as e:
        log.error("Failed to load current assessment", user_id=user_id, error=str(e))
        return _error(500, "Failed to load assessment.", str(e))

    if result is None:
        return _error(404, f"No assessment found for user {user_id}.")
    return _envelope(result, saved=True)


@router.get("/assessment/stats/{user_id}", response_model=StatsResponse, responses={500: {"model": ErrorResponse}})
async def assessment_stats(user_id: str):
    try:
        stats = await get_assessment_stats(user_id)
    except Exception as e:
        log.error("Failed to load assessment history", user_id=user_id, error=str(e))
        return _error(500, "Failed to load assessment history.", str(e))
    return StatsResponse(status="success", data=stats)


@router.get("/assessment/{assessment_id}", response_model=AssessmentEnvelope, responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def assessment_by_id(assessment_id: str):
    try:
        result = await get_assessment_by_id(assessment_id)
    except Exception as e:
        log.error("Failed to load assessment", assessment_id=assessment_id, error=str(e))
        return _error(500, "Failed to load assessment.", str(e))

    if result is None:
        return _error(404, f"Assessment {assessment_id} not found.")
    return _envelope(result, saved=True)


@router.post("/assessment/recommendation-profile", response_model=RecommendationProfileResponse, responses={422: {"model": ErrorResponse}})
async def recommendation_profile(request: ScoreRequest):
    if not request.responses:
        return _error(422, "At least one response is required.")
    return RecommendationProfileResponse(status="success", data=build_recommendation_profile(_score(request)))

# ─────────────────────────────
# Matching

@router.post("/recommend", response_model=RecommendResponse, responses={404: {"model": ErrorResponse}})
async def recommend(request: RecommendRequest):
    REQUEST_COUNTER.inc()

    matches = await run_matcher(request.client, THERAPISTS, top_n=request.top_n)

    if not matches:
        return _error(404, "No suitable therapists found with at least 30% match score.")

    return RecommendResponse(status="success", data=matches)


@router.post("/recommend/{user_id}", response_model=RecommendResponse, responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def recommend_for_user(user_id: str, request: PreferencesRequest = PreferencesRequest()):
    REQUEST_COUNTER.inc()

    try:
        matches = await run_matcher_for_user(user_id, THERAPISTS, request.preferences, top_n=request.top_n)
    except Exception as e:
        log.error("Failed to load assessment for matching", user_id=user_id, error=str(e))
        return _error(500, "Failed to load assessment.", str(e))

    if matches is None:
        return _error(404, f"No assessment found for user {user_id}.")
    if not matches:
        return _error(404, "No suitable therapists found with at least 30% match score.")

    return RecommendResponse(status="success", data=matches)


@router.post("/therapists/listing", response_model=ListingResponse)
async def therapist_listing(request: ListingRequest):
    listing = await run_listing(request.client, THERAPISTS, request.filters)
    return ListingResponse(status="success", data=listing)
