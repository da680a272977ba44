# 📦 engine/filters.py
# ─────────────────────────────
# Directory filters over the therapist roster, and the listing partition

from engine.matcher import RECOMMENDED_SCORE
from schemas.therapist import TherapistListingResults


def filter_by_specializations(flt, th):
    """Therapist lists every requested specialization."""
    return all(spec in th.specializations for spec in flt.specializations)


def filter_by_languages(flt, th):
    """Therapist speaks every requested language."""
    return all(lang in th.languages for lang in flt.languages)


def filter_by_insurance(flt, th):
    return all(ins in th.insurance_accepted for ins in flt.insurance_accepted)


def filter_by_gender(flt, th):
    if not flt.gender or flt.gender == "any":
        return True
    return th.gender == flt.gender


def filter_by_price(flt, th):
    """Rate for the filtered session type inside the price range."""
    if flt.price_range is None:
        return True
    rate = getattr(th.hourly_rates, flt.session_type, 0) or 0
    return flt.price_range.min <= rate <= flt.price_range.max


def filter_by_services(flt, th):
    """At least one requested service mode (in person / online)."""
    if not flt.services_offered:
        return True
    return bool(set(flt.services_offered) & set(th.services_offered))


def filter_by_availability(flt, th):
    """At least one slot on a requested day."""
    if not flt.availability:
        return True
    days = {d.lower() for d in flt.availability}
    return any(slot.day.lower() in days for slot in th.availability_slots)


def filter_by_search(flt, th):
    """Case-insensitive name match, or exact specialization match."""
    if not flt.search_query:
        return True
    query = flt.search_query.strip()
    return query.lower() in th.full_name.lower() or query in th.specializations


def apply_all_filters(flt, th):
    """Applies all directory filters sequentially."""
    return (
        filter_by_specializations(flt, th)
        and filter_by_languages(flt, th)
        and filter_by_insurance(flt, th)
        and filter_by_gender(flt, th)
        and filter_by_price(flt, th)
        and filter_by_services(flt, th)
        and filter_by_availability(flt, th)
        and filter_by_search(flt, th)
    )


def filter_roster(flt, therapists):
    if flt is None:
        return list(therapists)
    return [th for th in therapists if apply_all_filters(flt, th)]


def partition_listing(therapists, matches, threshold=RECOMMENDED_SCORE):
    """Split a roster into recommended (by match score) and other therapists."""
    scores = {m.therapist_id: m for m in matches}
    recommended, other = [], []
    for th in therapists:
        match = scores.get(th.id)
        if match is not None and match.displayed_score >= threshold:
            recommended.append(th)
        else:
            other.append(th)

    recommended.sort(key=lambda th: scores[th.id].total_score, reverse=True)

    return TherapistListingResults(
        recommended=recommended,
        other=other,
        total_count=len(therapists),
        match_scores=scores,
    )
