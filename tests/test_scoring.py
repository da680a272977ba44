# 📦 /tests/test_scoring.py

from datetime import timedelta

import pytest

from engine.questions import GAD7_IDS, PHQ9_IDS, PSS_IDS, WHO5_IDS, get_question
from engine.responses import ResponseLog
from engine.scoring import (
    FALLBACK_RECOMMENDATIONS,
    determine_overall_risk,
    generate_recommendations,
    item_score,
    score_assessment,
    score_gad7,
    score_phq9,
    score_stress,
    score_well_being,
    suicidal_ideation_indicated,
)
from schemas.assessment import InstrumentScore, RiskLevel
from tests.utils.dummies import BASE_TIME, answers, make_responses, spread

# ---------------------- Tier boundaries ----------------------

@pytest.mark.parametrize("total, tier", [
    (0, "minimal"), (4, "minimal"), (5, "mild"), (9, "mild"), (10, "moderate"),
    (14, "moderate"), (15, "moderately-severe"), (19, "moderately-severe"),
    (20, "severe"), (27, "severe"),
])
def test_phq9_tier_boundaries(total, tier):
    result = score_phq9(spread(PHQ9_IDS, total, 3))
    assert result.score == total
    assert result.risk_level == tier


@pytest.mark.parametrize("total, tier", [
    (4, "minimal"), (5, "mild"), (9, "mild"), (10, "moderate"), (14, "moderate"), (15, "severe"), (21, "severe"),
])
def test_gad7_tier_boundaries(total, tier):
    result = score_gad7(spread(GAD7_IDS, total, 3))
    assert result.score == total
    assert result.risk_level == tier


@pytest.mark.parametrize("total, tier", [(7, "low"), (8, "moderate"), (14, "moderate"), (15, "high"), (20, "high")])
def test_stress_tier_boundaries(total, tier):
    result = score_stress(spread(PSS_IDS, total, 4))
    assert result.score == total
    assert result.risk_level == tier


@pytest.mark.parametrize("raw, score, tier", [
    (6, 24, "poor"), (7, 28, "below-average"), (12, 48, "below-average"), (13, 52, "average"),
    (17, 68, "good"), (21, 84, "excellent"), (25, 100, "excellent"),
])
def test_well_being_is_raw_sum_times_four(raw, score, tier):
    result = score_well_being(spread(WHO5_IDS, raw, 5))
    assert result.score == score
    assert result.score % 4 == 0
    assert result.risk_level == tier

# ---------------------- Item handling ----------------------

def test_missing_items_count_as_zero():
    assert score_phq9({}).score == 0
    assert score_phq9({"phq9_1": 2}).score == 2


def test_out_of_range_values_are_clamped():
    assert score_phq9({qid: 9 for qid in PHQ9_IDS}).score == 27
    assert score_gad7({qid: -4 for qid in GAD7_IDS}).score == 0
    assert score_well_being({qid: 12 for qid in WHO5_IDS}).score == 100


def test_string_and_malformed_values():
    responses = {"phq9_1": "2", "phq9_2": "often", "phq9_3": float("nan"), "phq9_4": True, "phq9_5": None}
    assert item_score(responses, "phq9_1") == 2
    assert item_score(responses, "phq9_2") == 0
    assert item_score(responses, "phq9_3") == 0
    assert item_score(responses, "phq9_4") == 0
    assert score_phq9(responses).score == 2


def test_accepts_dict_records_and_response_logs():
    log = ResponseLog(make_responses({"phq9_1": 1, "phq9_2": 3}))
    assert score_phq9(log).score == 4
    assert score_phq9({"phq9_1": {"value": 3, "timestamp": BASE_TIME}}).score == 3


def test_pss_reverse_items_sum_their_option_values():
    reversed_item = get_question("pss_4")
    labels = {o.label: o.value for o in reversed_item.options}
    assert labels["Never"] == 4
    assert labels["Very often"] == 0

    # "Very often" confident / going well adds nothing; no re-inversion at scoring time
    responses = {"pss_1": 4, "pss_2": 4, "pss_3": 4, "pss_4": labels["Very often"], "pss_5": labels["Very often"]}
    assert score_stress(responses).score == 12

# ---------------------- Invariants ----------------------

def test_scores_are_deterministic():
    responses = answers(phq9=2, gad7=1, pss=3, who5=2)
    assert score_phq9(responses) == score_phq9(responses)
    assert score_gad7(responses) == score_gad7(responses)
    assert score_stress(responses) == score_stress(responses)
    assert score_well_being(responses) == score_well_being(responses)


def test_scores_stay_in_range():
    for value in range(0, 6):
        responses = answers(phq9=value, gad7=value, pss=value, who5=value)
        assert 0 <= score_phq9(responses).score <= 27
        assert 0 <= score_gad7(responses).score <= 21
        assert 0 <= score_stress(responses).score <= 20
        assert 0 <= score_well_being(responses).score <= 100


def test_phq9_is_monotonic_per_item():
    base = spread(PHQ9_IDS, 8, 3)
    for qid in PHQ9_IDS:
        before = score_phq9(base)
        for value in range(base[qid] + 1, 4):
            after = score_phq9({**base, qid: value})
            assert after.score >= before.score
            assert RiskLevel(after.risk_level).rank >= RiskLevel(before.risk_level).rank
            before = after

# ---------------------- Overall risk ----------------------

def test_overall_risk_takes_more_severe_tier():
    assert determine_overall_risk("mild", "severe") == RiskLevel.SEVERE
    assert determine_overall_risk("moderately-severe", "moderate") == RiskLevel.MODERATELY_SEVERE
    assert determine_overall_risk("minimal", "minimal") == RiskLevel.MINIMAL


def test_unknown_tier_ranks_as_minimal():
    assert determine_overall_risk("bogus", "mild") == RiskLevel.MILD
    assert determine_overall_risk("bogus", None) == RiskLevel.MINIMAL


def test_risk_levels_are_ordered():
    ranks = [level.rank for level in RiskLevel]
    assert ranks == sorted(ranks)
    assert RiskLevel.SEVERE.rank > RiskLevel.MODERATELY_SEVERE.rank

# ---------------------- Recommendations ----------------------

def test_recommendations_are_deduplicated_in_first_seen_order():
    result = score_assessment(make_responses(answers(phq9=2, gad7=3)), user_id="u1")
    shared = "Professional mental health treatment is strongly recommended"
    assert result.recommendations.count(shared) == 1
    assert result.recommendations[0] == result.scores.phq9.recommendations[0]


def test_primary_concern_line_is_appended():
    result = score_assessment(make_responses(answers(primary_concern="work_stress")), user_id="u1")
    assert result.recommendations[-1] == "Connect with a therapist who specializes in work stress"


def test_empty_recommendations_fall_back():
    empty = InstrumentScore(score=0, risk_level="minimal", interpretation="", recommendations=[])
    assert generate_recommendations(empty, empty, empty, empty) == FALLBACK_RECOMMENDATIONS

# ---------------------- Aggregation ----------------------

def test_scenario_all_phq9_items_maxed():
    result = score_assessment(make_responses(answers(phq9=3)), user_id="u1")
    assert result.scores.phq9.score == 27
    assert result.scores.phq9.risk_level == "severe"
    assert result.risk_level == RiskLevel.SEVERE
    assert "Immediate professional mental health evaluation recommended." in result.recommendations


def test_scenario_no_symptoms_is_minimal():
    result = score_assessment(make_responses(answers(phq9=0, gad7=0)), user_id="u1")
    assert result.risk_level == RiskLevel.MINIMAL
    assert result.crisis_flagged is False


def test_suicidal_ideation_flags_result_independent_of_total():
    responses = make_responses(answers(phq9_9=1))
    assert suicidal_ideation_indicated(ResponseLog(responses))
    result = score_assessment(responses, user_id="u1")
    assert result.scores.phq9.risk_level == "minimal"
    assert result.crisis_flagged is True


def test_completed_at_defaults_to_latest_response():
    responses = make_responses(answers(phq9=1))
    result = score_assessment(responses, user_id="u1", assessment_id="a1")
    assert result.completed_at == BASE_TIME + timedelta(seconds=len(responses) - 1)
    assert score_assessment(responses, user_id="u1", assessment_id="a1") == result


def test_completed_at_required_without_timestamps():
    with pytest.raises(ValueError):
        score_assessment(answers(phq9=1), user_id="u1")
    result = score_assessment(answers(phq9=1), user_id="u1", completed_at=BASE_TIME)
    assert result.scores.phq9.score == 9


def test_bare_values_are_recorded_at_completion_time():
    result = score_assessment(answers(phq9=1, primary_concern="grief"), user_id="u1", completed_at=BASE_TIME)
    recorded = {r.question_id: r for r in result.responses}
    assert len(recorded) == len(answers(phq9=1, primary_concern="grief"))
    assert recorded["phq9_1"].value == 1
    assert recorded["primary_concern"].value == "grief"
    assert all(r.timestamp == BASE_TIME for r in result.responses)


def test_later_answer_overrides_earlier():
    responses = make_responses({"phq9_1": 3}) + make_responses({"phq9_1": 1}, start=BASE_TIME + timedelta(minutes=1))
    result = score_assessment(responses, user_id="u1")
    assert result.scores.phq9.score == 1
    assert len(result.responses) == 1
