# 📦 /tests/test_filters.py

from engine.filters import apply_all_filters, filter_roster, partition_listing
from engine.matcher import find_matches
from schemas.therapist import AvailabilitySlot, HourlyRates, MatchBreakdown, MatchScore, PriceRange, TherapistSearchFilters
from tests.utils.dummies import make_client, make_poor_fit_therapist, make_therapist


def make_directory():
    return [
        make_therapist("ana", full_name="Ana Ruiz", languages=["English", "Spanish"], gender="female"),
        make_therapist(
            "ben",
            full_name="Ben Okafor",
            gender="male",
            specializations=["Depression", "Grief and Loss"],
            hourly_rates=HourlyRates(individual=150),
            services_offered=["online"],
            availability_slots=[AvailabilitySlot(day="Friday", start_time="12:00", end_time="18:00")],
            insurance_accepted=[],
        ),
        make_poor_fit_therapist("cy"),
    ]


def ids(therapists):
    return [th.id for th in therapists]


def test_no_filters_keeps_everyone():
    roster = make_directory()
    assert ids(filter_roster(TherapistSearchFilters(), roster)) == ["ana", "ben", "cy"]
    assert ids(filter_roster(None, roster)) == ["ana", "ben", "cy"]


def test_specialization_and_language_filters():
    roster = make_directory()
    assert ids(filter_roster(TherapistSearchFilters(specializations=["Depression"]), roster)) == ["ben"]
    assert ids(filter_roster(TherapistSearchFilters(languages=["Spanish"]), roster)) == ["ana"]


def test_price_filter_uses_session_type():
    roster = make_directory()
    flt = TherapistSearchFilters(price_range=PriceRange(min=50, max=100))
    assert ids(filter_roster(flt, roster)) == ["ana"]
    assert ids(filter_roster(TherapistSearchFilters(price_range=PriceRange(min=140, max=160)), roster)) == ["ben"]
    couples = TherapistSearchFilters(price_range=PriceRange(min=110, max=130), session_type="couples")
    assert ids(filter_roster(couples, roster)) == ["ana"]


def test_gender_insurance_services_and_day_filters():
    roster = make_directory()
    assert ids(filter_roster(TherapistSearchFilters(gender="male"), roster)) == ["ben"]
    assert ids(filter_roster(TherapistSearchFilters(gender="any"), roster)) == ["ana", "ben", "cy"]
    assert ids(filter_roster(TherapistSearchFilters(insurance_accepted=["Aetna"]), roster)) == ["ana", "cy"]
    assert ids(filter_roster(TherapistSearchFilters(services_offered=["in_person"]), roster)) == ["ana", "cy"]
    assert ids(filter_roster(TherapistSearchFilters(availability=["friday"]), roster)) == ["ben"]


def test_search_matches_name_or_specialization():
    roster = make_directory()
    assert ids(filter_roster(TherapistSearchFilters(search_query="okafor"), roster)) == ["ben"]
    assert ids(filter_roster(TherapistSearchFilters(search_query="Anxiety Disorders"), roster)) == ["ana"]
    assert apply_all_filters(TherapistSearchFilters(search_query="nobody"), roster[0]) is False


def test_listing_partition_by_recommended_score():
    client = make_client()
    roster = [make_poor_fit_therapist("cy"), make_therapist("partial", specializations=["Panic Disorder"]), make_therapist("ana")]
    listing = partition_listing(roster, find_matches(client, roster))

    assert ids(listing.recommended) == ["ana", "partial"]
    assert ids(listing.other) == ["cy"]
    assert listing.total_count == 3
    assert set(listing.match_scores) == {"ana", "partial"}


def test_listing_threshold_is_separate_from_floor():
    client = make_client()
    roster = [make_therapist(
        "pricey",
        hourly_rates=HourlyRates(individual=180),
        specializations=["OCD"],
        years_experience=0,
        therapy_approaches=[],
    )]
    matches = find_matches(client, roster)
    listing = partition_listing(roster, matches)

    assert matches and 0.30 <= matches[0].total_score < 0.70
    assert listing.recommended == []
    assert ids(listing.other) == ["pricey"]


def test_recommended_cut_compares_two_decimal_score():
    roster = [make_therapist("edge"), make_therapist("below")]
    breakdown = MatchBreakdown(
        specialization_match=1.0,
        experience_match=1.0,
        approach_match=1.0,
        availability_match=1.0,
        cost_match=1.0,
        preference_match=1.0,
        crisis_readiness=1.0,
    )
    matches = [
        MatchScore(therapist_id="edge", total_score=0.6999, breakdown=breakdown),
        MatchScore(therapist_id="below", total_score=0.6949, breakdown=breakdown),
    ]
    listing = partition_listing(roster, matches)

    assert ids(listing.recommended) == ["edge"]
    assert ids(listing.other) == ["below"]
