# 📦 utils/fetch_therapists.py

import asyncio
import structlog
from typing import List, get_args

from pydantic import ValidationError

from schemas.therapist import Gender, HourlyRates, TherapistProfile
from supabase_client import get_supabase, supabase_settings

log = structlog.get_logger()

THERAPIST_COLUMNS = (
    "id, full_name, gender, license_type, years_experience, years_private_practice, "
    "specializations, therapy_approaches, client_demographics, severity_levels, "
    "crisis_intervention_trained, trauma_informed_certified, languages, availability_slots, "
    "session_durations, hourly_rates, sliding_scale_available, insurance_accepted, "
    "city, state_province, country, emergency_availability"
)

GENDERS = set(get_args(Gender))


def _location(th):
    parts = [th.get("city"), th.get("state_province"), th.get("country")]
    return ", ".join(p for p in parts if p)


def _gender(value):
    return value if value in GENDERS else "not_specified"


def record_to_therapist(th: dict) -> TherapistProfile:
    """Map a directory row onto a TherapistProfile, defaulting absent fields."""
    return TherapistProfile(
        id=str(th.get("id")),
        full_name=th.get("full_name") or "",
        gender=_gender(th.get("gender")),
        license_type=th.get("license_type") or "",
        years_experience=th.get("years_experience") or 0,
        years_private_practice=th.get("years_private_practice"),
        specializations=th.get("specializations") or [],
        therapy_approaches=th.get("therapy_approaches") or [],
        client_demographics=th.get("client_demographics") or [],
        severity_levels=th.get("severity_levels") or [],
        crisis_intervention_trained=bool(th.get("crisis_intervention_trained")),
        trauma_informed_certified=bool(th.get("trauma_informed_certified")),
        languages=th.get("languages") or [],
        availability_slots=th.get("availability_slots") or [],
        session_durations=th.get("session_durations") or [],
        hourly_rates=th.get("hourly_rates") or HourlyRates(),
        sliding_scale_available=bool(th.get("sliding_scale_available")),
        insurance_accepted=th.get("insurance_accepted") or [],
        location=_location(th),
        services_offered=th.get("services_offered") or ["in_person", "online"],
        emergency_availability=bool(th.get("emergency_availability")),
    )


def records_to_therapists(rows) -> List[TherapistProfile]:
    """Map directory rows, skipping any row that fails validation."""
    therapists = []
    for th in rows:
        try:
            therapists.append(record_to_therapist(th))
        except ValidationError as e:
            log.warning("Skipping malformed therapist record", therapist_id=th.get("id"), errors=e.error_count())
    return therapists


async def fetch_therapists(retries: int = 3, delay: float = 2.0, limit: int = 500) -> List[TherapistProfile]:
    """Fetch approved therapists from Supabase, with retry logic."""
    for attempt in range(retries):
        try:
            log.info(f"Fetching therapists (attempt {attempt+1})")
            response = (
                get_supabase()
                .table(supabase_settings.therapists_table)
                .select(THERAPIST_COLUMNS)
                .eq("status", "approved")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            log.error(f"Failed to fetch therapists (attempt {attempt+1}): {e}")
            if attempt < retries - 1:
                await asyncio.sleep(delay * (2 ** attempt))  # Exponential backoff
                continue
            raise Exception("Startup failed: Could not fetch therapists from Supabase.") from e

        if not response.data:
            log.warning("No therapists found in Supabase.")
            return []

        therapists = records_to_therapists(response.data)
        log.info(f"Successfully fetched {len(therapists)} therapists from Supabase.")
        return therapists
