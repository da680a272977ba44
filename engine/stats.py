# 📦 engine/stats.py
# ─────────────────────────────
# Assessment history statistics for one user

import pandas as pd

from engine.scoring import GAD7_TIERS, PHQ9_TIERS, to_risk_level
from schemas.assessment import AssessmentStats, ProgressIndicators


def _tier_for(score, tiers):
    for upper, level, _, _ in tiers:
        if score <= upper:
            return level.value
    return tiers[-1][1].value


def history_frame(results) -> pd.DataFrame:
    """One row per assessment, newest first."""
    rows = [
        {
            "completed_at": r.completed_at,
            "risk_level": r.risk_level,
            "phq9_score": r.scores.phq9.score,
            "gad7_score": r.scores.gad7.score,
            "who_wellbeing_score": r.scores.well_being.score,
        }
        for r in results
    ]
    df = pd.DataFrame(rows, columns=["completed_at", "risk_level", "phq9_score", "gad7_score", "who_wellbeing_score"])
    return df.sort_values("completed_at", ascending=False, kind="stable").reset_index(drop=True)


def risk_trend(df):
    if len(df) < 2:
        return "insufficient_data"
    recent = to_risk_level(df.loc[0, "risk_level"]).rank
    previous = to_risk_level(df.loc[1, "risk_level"]).rank
    if recent < previous:
        return "improving"
    if recent > previous:
        return "worsening"
    return "stable"


def progress_indicators(df):
    if df.empty:
        return None
    latest = df.iloc[0]
    strengths = []
    if latest["phq9_score"] <= 4:
        strengths.append("Low depression symptoms")
    if latest["gad7_score"] <= 4:
        strengths.append("Well-managed anxiety")
    if latest["who_wellbeing_score"] >= 60:
        strengths.append("Good overall well-being")

    return ProgressIndicators(
        current_depression=_tier_for(latest["phq9_score"], PHQ9_TIERS),
        current_anxiety=_tier_for(latest["gad7_score"], GAD7_TIERS),
        improvement_needed=bool(latest["phq9_score"] > 9 or latest["gad7_score"] > 9),
        strengths=strengths,
    )


def summarize_history(results) -> AssessmentStats:
    df = history_frame(results)
    if df.empty:
        return AssessmentStats(
            total_assessments=0,
            average_phq9_score=0.0,
            average_gad7_score=0.0,
            risk_level_trend="insufficient_data",
        )

    return AssessmentStats(
        total_assessments=len(df),
        last_assessment=pd.Timestamp(df.loc[0, "completed_at"]).to_pydatetime(),
        average_phq9_score=float(df["phq9_score"].mean()),
        average_gad7_score=float(df["gad7_score"].mean()),
        risk_level_trend=risk_trend(df),
        progress_indicators=progress_indicators(df),
    )
