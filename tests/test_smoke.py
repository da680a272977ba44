# 📦 /tests/test_smoke.py

import pytest

from services.analytics import ASSESSMENTS_STARTED_COUNTER, track_assessment_start
from services.matcher_service import run_listing, run_matcher
from schemas.therapist import TherapistSearchFilters
from tests.utils.dummies import make_client, make_poor_fit_therapist, make_therapist


@pytest.mark.asyncio
async def test_matcher_direct_async():
    results = await run_matcher(make_client(), [])
    assert isinstance(results, list)
    assert results == []


@pytest.mark.asyncio
async def test_run_matcher_filters_and_ranks():
    roster = [make_poor_fit_therapist("poor"), make_therapist("best")]
    results = await run_matcher(make_client(), roster)
    assert [m.therapist_id for m in results] == ["best"]
    assert 0 <= results[0].total_score <= 1


@pytest.mark.asyncio
async def test_listing_filters_before_matching():
    roster = [make_therapist("best"), make_therapist("spanish", languages=["Spanish"])]
    listing = await run_listing(make_client(), roster, TherapistSearchFilters(languages=["Spanish"]))
    assert listing.total_count == 1
    assert [th.id for th in listing.recommended] == ["spanish"]
    assert listing.other == []


@pytest.mark.asyncio
async def test_listing_with_empty_roster():
    listing = await run_listing(make_client(), [], TherapistSearchFilters())
    assert listing.total_count == 0
    assert listing.recommended == []


def test_track_assessment_start_counts_and_records(fake_supabase):
    before = ASSESSMENTS_STARTED_COUNTER._value.get()
    track_assessment_start("u1")
    assert ASSESSMENTS_STARTED_COUNTER._value.get() == before + 1
    events = fake_supabase.tables["assessment_events"]
    assert [(e["event"], e["user_id"], e["data"]) for e in events] == [("assessment_started", "u1", {})]


def test_track_assessment_start_tolerates_storage_outage(fake_supabase):
    fake_supabase.fail = True
    track_assessment_start("u1")
    assert "assessment_events" not in fake_supabase.tables
