# 📦 /services/analytics.py
# ─────────────────────────────
# Assessment analytics events: started, suicide risk indicated

import asyncio
from datetime import datetime, timezone

import structlog
from prometheus_client import Counter

from supabase_client import get_supabase, supabase_settings
from utils.supabase_utils import PersistenceError, insert_with_retry

log = structlog.get_logger()

ASSESSMENTS_STARTED_COUNTER = Counter("govently_assessments_started", "Assessments started")
SUICIDE_RISK_COUNTER = Counter("govently_suicide_risk_indicated", "Assessments with a positive suicidal-ideation item")


def _record_event(event, user_id, **data):
    row = {
        "event": event,
        "user_id": user_id,
        "data": data,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        insert_with_retry(get_supabase().table(supabase_settings.events_table), row, retries=2, delay=0.5)
    except (PersistenceError, RuntimeError) as e:
        log.error("Failed to record analytics event", event_name=event, user_id=user_id, error=str(e))


def track_assessment_start(user_id):
    ASSESSMENTS_STARTED_COUNTER.inc()
    log.info("assessment_started", user_id=user_id)
    _record_event("assessment_started", user_id)


def track_suicide_risk_indicated(user_id, assessment_id=None):
    """Flag a positive suicidal-ideation answer for clinical follow-up."""
    SUICIDE_RISK_COUNTER.inc()
    log.warning("suicide_risk_indicated", user_id=user_id, assessment_id=assessment_id, requires_followup=True)
    _record_event("suicide_risk_indicated", user_id, assessment_id=assessment_id, requires_followup=True)


async def track_suicide_risk_indicated_async(user_id, assessment_id=None):
    await asyncio.to_thread(track_suicide_risk_indicated, user_id, assessment_id)
