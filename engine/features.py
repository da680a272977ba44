# 📦 engine/features.py
# ─────────────────────────────
# The seven compatibility factors. Each returns a value in [0, 1].

NEUTRAL = 0.5

CONCERN_SPECIALIZATIONS = {
    "anxiety": ["Anxiety Disorders", "OCD", "Panic Disorder"],
    "depression": ["Depression", "Mood Disorders", "Bipolar Disorder"],
    "trauma": ["Trauma and PTSD", "EMDR", "Complex Trauma"],
    "relationships": ["Relationship Issues", "Couples Counseling", "Communication Skills"],
    "family": ["Family Therapy", "Family Systems", "Parenting Support"],
    "grief": ["Grief and Loss", "Bereavement Counseling"],
    "stress": ["Stress Management", "Burnout Prevention", "Life Transitions"],
    "self_esteem": ["Self-Esteem Building", "Identity Issues", "Personal Growth"],
}

# Question-bank concern values that share a synonym set
CONCERN_ALIASES = {
    "family_issues": "family",
    "work_stress": "stress",
}

CONCERN_APPROACHES = {
    "anxiety": ["Cognitive Behavioral Therapy (CBT)", "Acceptance and Commitment Therapy (ACT)", "Mindfulness-Based Therapy"],
    "depression": ["Cognitive Behavioral Therapy (CBT)", "Psychodynamic Therapy", "Interpersonal Therapy"],
    "trauma": ["Eye Movement Desensitization and Reprocessing (EMDR)", "Trauma-Focused CBT", "Somatic Therapies"],
    "relationships": ["Emotionally Focused Therapy (EFT)", "Gottman Method", "Solution-Focused Brief Therapy (SFBT)"],
    "addiction": ["Motivational Interviewing", "Dialectical Behavior Therapy (DBT)", "Cognitive Behavioral Therapy (CBT)"],
}

REQUIRED_YEARS = {"high": 7, "moderate": 3, "low": 1}

STANDARD_SESSION_MINUTES = 60

NO_GENDER_PREFERENCE = {"", "no_preference", "any"}


def _concern_key(cli):
    concern = (cli.primary_concern or "").strip().lower()
    return CONCERN_ALIASES.get(concern, concern)


def _clamp(value):
    return max(0.0, min(1.0, float(value)))


def relevant_specializations(cli):
    """Synonym set of specializations for the client's primary concern."""
    key = _concern_key(cli)
    return CONCERN_SPECIALIZATIONS.get(key) or [cli.primary_concern]


def recommended_approaches(cli):
    return CONCERN_APPROACHES.get(_concern_key(cli), [])


def client_complexity(cli):
    """Complexity tier from severity and history points."""
    points = 0
    if cli.severity_level in ("severe", "crisis"):
        points += 2
    elif cli.severity_level == "moderate":
        points += 1
    if cli.trauma_history:
        points += 1
    if cli.crisis_history:
        points += 1
    if cli.therapy_experience == "past_unhelpful":
        points += 1

    if points >= 4:
        return "high"
    if points >= 2:
        return "moderate"
    return "low"


def specialization_match(cli, th):
    """Share of the concern's synonym set covered by the therapist's specializations."""
    relevant = [r.lower() for r in relevant_specializations(cli) if r]
    matching = [
        spec for spec in th.specializations
        if spec and any(r in spec.lower() or spec.lower() in r for r in relevant)
    ]
    return _clamp(len(matching) / max(len(relevant), 1))


def experience_match(cli, th):
    """Years of experience against the threshold for the client's complexity."""
    required = REQUIRED_YEARS[client_complexity(cli)]
    return _clamp(th.years_experience / required)


def approach_match(cli, th):
    """Evidence-based approaches for the concern; neutral when none are mapped."""
    recommended = [r.lower() for r in recommended_approaches(cli)]
    if not recommended:
        return NEUTRAL
    matching = [a for a in th.therapy_approaches if any(r in a.lower() for r in recommended)]
    return _clamp(len(matching) / len(recommended))


def availability_match(cli, th):
    """Open slots and a standard 60-minute session."""
    score = 0.0
    if th.availability_slots:
        score += 0.6
    if STANDARD_SESSION_MINUTES in th.session_durations:
        score += 0.4
    return _clamp(score)


def session_rate(cli, th):
    session_type = cli.preferred_session_type or "individual"
    return getattr(th.hourly_rates, session_type, 0) or 0


def cost_match(cli, th):
    """Rate for the preferred session type against the client's budget."""
    if cli.budget_range is None:
        return NEUTRAL
    rate = session_rate(cli, th)
    if not rate:
        return NEUTRAL

    low, high = cli.budget_range.min, cli.budget_range.max
    if low <= rate <= high:
        return 1.0
    if rate < low:
        return 0.8
    if th.sliding_scale_available:
        return 0.7
    if high <= 0:
        return 0.0
    return _clamp(1 - (rate - high) / high)


def language_overlap(cli, th):
    return bool(set(cli.preferred_languages) & set(th.languages))


def preference_match(cli, th):
    """Gender, language and insurance preferences, normalized by how many were given."""
    score = 0.0
    specified = 0

    if (cli.therapy_preference or "") not in NO_GENDER_PREFERENCE:
        specified += 1
        if th.gender in (cli.therapy_preference, "not_specified"):
            score += 0.4

    if cli.preferred_languages:
        specified += 1
        if language_overlap(cli, th):
            score += 0.4

    if cli.insurance_provider:
        specified += 1
        if cli.insurance_provider in th.insurance_accepted:
            score += 0.2

    if not specified:
        return NEUTRAL
    return _clamp(score / (specified * 0.2))


def in_crisis(cli):
    return cli.severity_level == "crisis" or cli.crisis_history


def crisis_readiness(cli, th):
    """Crisis training, emergency availability and seniority for clients in crisis."""
    if not in_crisis(cli):
        return NEUTRAL
    score = 0.0
    if th.crisis_intervention_trained:
        score += 0.5
    if th.emergency_availability:
        score += 0.3
    if th.years_experience >= 5:
        score += 0.2
    return _clamp(score)


# ─────────────────────────────
# Full breakdown builder

FACTORS = {
    "specialization_match": specialization_match,
    "experience_match": experience_match,
    "approach_match": approach_match,
    "availability_match": availability_match,
    "cost_match": cost_match,
    "preference_match": preference_match,
    "crisis_readiness": crisis_readiness,
}


def build_breakdown(cli, th):
    """Assemble all factor scores for a client-therapist pair."""
    return {name: float(fn(cli, th)) for name, fn in FACTORS.items()}
