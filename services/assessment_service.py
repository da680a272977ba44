# 📦 /services/assessment_service.py
# ─────────────────────────────
# Scoring, persistence and retrieval of user assessments

import asyncio
from datetime import datetime

import structlog
from prometheus_client import Counter

from engine.flow import AssessmentSession, load_crisis_support
from engine.responses import ResponseLog
from engine.scoring import score_assessment
from engine.stats import summarize_history
from services.analytics import (
    track_assessment_start,
    track_suicide_risk_indicated,
    track_suicide_risk_indicated_async,
)
from supabase_client import get_supabase, supabase_settings
from utils.supabase_utils import PersistenceError, upsert_with_retry

log = structlog.get_logger()

ASSESSMENTS_SCORED_COUNTER = Counter("govently_assessments_scored", "Assessments scored")
PERSISTENCE_FAILURES_COUNTER = Counter("govently_assessment_save_failures", "Assessments scored but not saved")


# ─────────────────────────────
# Record mapping

def serialize_responses(responses):
    return {
        r.question_id: {"value": r.value, "timestamp": r.timestamp.isoformat()}
        for r in responses
    }


def result_to_record(result) -> dict:
    return {
        "user_id": result.user_id,
        "assessment_id": result.assessment_id,
        "responses": serialize_responses(result.responses),
        "phq9_score": result.scores.phq9.score,
        "gad7_score": result.scores.gad7.score,
        "pss10_score": result.scores.stress.score,
        "who_wellbeing_score": result.scores.well_being.score,
        "risk_level": result.risk_level.value,
        "recommendations": result.recommendations,
        "completed_at": result.completed_at.isoformat(),
    }


def record_to_result(record: dict):
    """Rebuild an AssessmentResult by rescoring the stored responses."""
    log_ = ResponseLog()
    for question_id, data in (record.get("responses") or {}).items():
        log_ = log_.record(question_id, data.get("value"), datetime.fromisoformat(data["timestamp"]))
    return score_assessment(
        log_,
        user_id=record["user_id"],
        assessment_id=record["assessment_id"],
        completed_at=datetime.fromisoformat(record["completed_at"]),
    )


# ─────────────────────────────
# Sessions

def start_session(user_id, crisis_support=None):
    """Begin an assessment walk wired to the analytics hooks."""
    session = AssessmentSession(
        user_id,
        crisis_support=crisis_support or load_crisis_support(),
        on_start=track_assessment_start,
        on_suicide_risk=track_suicide_risk_indicated,
    )
    session.start()
    return session


# ─────────────────────────────
# Persistence

def _assessments():
    return get_supabase().table(supabase_settings.assessments_table)


def save_assessment_result(result):
    """Upsert the user's current assessment."""
    upsert_with_retry(_assessments(), result_to_record(result), on_conflict="user_id")
    log.info("Assessment saved", user_id=result.user_id, assessment_id=result.assessment_id)
    return result


async def complete_assessment(user_id, responses, assessment_id=None, completed_at=None):
    """Score and save an assessment.

    Returns ``(result, saved)``; a failed save still returns the computed result.
    """
    result = score_assessment(responses, user_id=user_id, assessment_id=assessment_id, completed_at=completed_at)
    ASSESSMENTS_SCORED_COUNTER.inc()

    if result.crisis_flagged:
        try:
            await track_suicide_risk_indicated_async(user_id, result.assessment_id)
        except Exception as e:
            log.error("Failed to track suicide risk", user_id=user_id, assessment_id=result.assessment_id, error=str(e))

    try:
        await asyncio.to_thread(save_assessment_result, result)
        return result, True
    except (PersistenceError, RuntimeError) as e:
        PERSISTENCE_FAILURES_COUNTER.inc()
        log.error("Assessment computed but not saved", user_id=user_id, assessment_id=result.assessment_id, error=str(e))
        return result, False


def _fetch(query):
    response = query.execute()
    return response.data or []


async def get_user_assessments(user_id):
    rows = await asyncio.to_thread(
        _fetch,
        _assessments().select("*").eq("user_id", user_id).order("completed_at", desc=True),
    )
    return [record_to_result(row) for row in rows]


async def get_current_assessment(user_id):
    results = await get_user_assessments(user_id)
    return results[0] if results else None


async def get_assessment_by_id(assessment_id):
    rows = await asyncio.to_thread(
        _fetch,
        _assessments().select("*").eq("assessment_id", assessment_id).limit(1),
    )
    return record_to_result(rows[0]) if rows else None


async def get_assessment_stats(user_id):
    return summarize_history(await get_user_assessments(user_id))
