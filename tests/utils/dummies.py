from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from engine.questions import GAD7_IDS, PHQ9_IDS, PSS_IDS, WHO5_IDS
from schemas.assessment import AssessmentResponse
from schemas.therapist import AvailabilitySlot, BudgetRange, ClientAssessment, HourlyRates, TherapistProfile

BASE_TIME = datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)


def spread(question_ids, total, ceiling):
    """Item values adding up to ``total``, filling items up to ``ceiling`` in order."""
    values = {}
    for qid in question_ids:
        value = min(ceiling, total)
        values[qid] = value
        total -= value
    return values


def answers(phq9=0, gad7=0, pss=0, who5=0, **extra):
    """Uniform answers per instrument plus any extra question values."""
    values = {}
    values.update({qid: phq9 for qid in PHQ9_IDS})
    values.update({qid: gad7 for qid in GAD7_IDS})
    values.update({qid: pss for qid in PSS_IDS})
    values.update({qid: who5 for qid in WHO5_IDS})
    values.update(extra)
    return values


def make_responses(values, start=BASE_TIME):
    """AssessmentResponses in dict order, one second apart."""
    return [
        AssessmentResponse(question_id=qid, value=value, timestamp=start + timedelta(seconds=i))
        for i, (qid, value) in enumerate(values.items())
    ]


def make_client(**overrides):
    """Moderate anxiety client with an English preference and a 50-100 budget."""
    data = dict(
        primary_concern="anxiety",
        severity_level="moderate",
        preferred_languages=["English"],
        budget_range=BudgetRange(min=50, max=100),
    )
    data.update(overrides)
    return ClientAssessment(**data)


def make_therapist(id, **overrides):
    """Well-rounded anxiety specialist that suits make_client() on every factor."""
    data = dict(
        id=id,
        full_name=f"Dr. {id.title()}",
        gender="female",
        license_type="LCSW",
        years_experience=8,
        specializations=["Anxiety Disorders", "OCD", "Panic Disorder"],
        therapy_approaches=[
            "Cognitive Behavioral Therapy (CBT)",
            "Acceptance and Commitment Therapy (ACT)",
            "Mindfulness-Based Therapy",
        ],
        languages=["English"],
        availability_slots=[AvailabilitySlot(day="Monday", start_time="09:00", end_time="17:00")],
        session_durations=[50, 60],
        hourly_rates=HourlyRates(individual=80, couples=120),
        insurance_accepted=["Aetna"],
        crisis_intervention_trained=True,
        trauma_informed_certified=True,
        emergency_availability=True,
    )
    data.update(overrides)
    return TherapistProfile(**data)


def make_poor_fit_therapist(id):
    """Scores below the matching floor for make_client()."""
    return make_therapist(
        id,
        years_experience=0,
        specializations=[],
        therapy_approaches=[],
        languages=["French"],
        availability_slots=[],
        session_durations=[],
        hourly_rates=HourlyRates(individual=500),
        crisis_intervention_trained=False,
        emergency_availability=False,
    )


# ─────────────────────────────
# In-memory Supabase stand-in

class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def upsert(self, data, on_conflict=None):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def select(self, columns="*"):
        self.op = "select"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def execute(self):
        if self.db.fail:
            raise ConnectionError("supabase unavailable")
        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[self.payload])

        if self.op == "upsert":
            key = self.payload[self.on_conflict]
            rows[:] = [r for r in rows if r.get(self.on_conflict) != key]
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[self.payload])

        found = [r for r in rows if all(r.get(c) == v for c, v in self.filters)]
        if self.order_by:
            column, desc = self.order_by
            found.sort(key=lambda r: r[column], reverse=desc)
        if self.row_limit is not None:
            found = found[: self.row_limit]
        return SimpleNamespace(data=found)


class FakeSupabase:
    def __init__(self, fail=False):
        self.fail = fail
        self.tables = {}

    def table(self, name):
        return FakeQuery(self, name)
