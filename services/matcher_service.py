# 📦 /services/matcher_service.py

from engine.client_profile import build_client_assessment
from engine.filters import filter_roster, partition_listing
from engine.matcher import Matcher
from prometheus_client import Counter
from services.assessment_service import get_current_assessment
from schemas.therapist import TherapistListingResults

REQUEST_COUNTER = Counter("govently_recommend_requests", "Total /recommend requests made")
MATCHES_RETURNED_COUNTER = Counter("govently_matches_returned", "Number of matches returned")
FILTERED_OUT_COUNTER = Counter("govently_matches_filtered_out", "Number of matches filtered out under minimum score")


async def run_matcher(client, therapists, top_n=None):
    matcher = Matcher(client, therapists)
    matches = matcher.run(top_n=top_n)

    MATCHES_RETURNED_COUNTER.inc(len(matches))
    FILTERED_OUT_COUNTER.inc(max(len(therapists) - len(matches), 0))
    return matches


async def run_matcher_for_user(user_id, therapists, preferences=None, top_n=None):
    """Match against the user's current stored assessment; None if there is none."""
    assessment = await get_current_assessment(user_id)
    if assessment is None:
        return None
    client = build_client_assessment(assessment, preferences)
    return await run_matcher(client, therapists, top_n=top_n)


async def run_listing(client, therapists, filters=None) -> TherapistListingResults:
    roster = filter_roster(filters, therapists)
    if client is None or not roster:
        return TherapistListingResults(recommended=[], other=roster, total_count=len(roster))
    matches = await run_matcher(client, roster)
    return partition_listing(roster, matches)
