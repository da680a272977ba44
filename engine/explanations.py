# 📦 engine/explanations.py
# ─────────────────────────────
# Human-readable reasons and concerns for a match breakdown

from engine.features import in_crisis, language_overlap


def compatibility_reasons(cli, th, breakdown):
    reasons = []

    if breakdown["specialization_match"] > 0.7:
        reasons.append(f"Specializes in {cli.primary_concern} treatment")
    if breakdown["experience_match"] == 1.0:
        reasons.append(f"{th.years_experience}+ years of experience")
    if breakdown["approach_match"] > 0.6:
        reasons.append("Uses evidence-based therapeutic approaches for your concerns")
    if breakdown["cost_match"] > 0.8:
        reasons.append("Rates fit within your budget range")
    if th.sliding_scale_available:
        reasons.append("Offers sliding scale pricing for financial flexibility")
    if th.crisis_intervention_trained and in_crisis(cli):
        reasons.append("Trained in crisis intervention")
    if language_overlap(cli, th):
        reasons.append(f"Fluent in {', '.join(cli.preferred_languages)}")

    return reasons


def potential_concerns(cli, th, breakdown):
    concerns = []

    if breakdown["specialization_match"] < 0.3:
        concerns.append("Limited specialization match with your primary concerns")
    if breakdown["experience_match"] < 0.5:
        concerns.append("May have limited experience with your specific needs")
    if breakdown["cost_match"] < 0.5:
        concerns.append("Rates may exceed your budget range")
    if cli.severity_level == "crisis" and not th.crisis_intervention_trained:
        concerns.append("Not specifically trained in crisis intervention")
    if cli.trauma_history and not th.trauma_informed_certified:
        concerns.append("No specific trauma-informed care certification")
    if breakdown["availability_match"] < 0.3:
        concerns.append("Limited availability may affect scheduling")

    return concerns
