# 📦 engine/matcher.py
# ─────────────────────────────
# Weighted therapist matching engine

import collections
import math
from pathlib import Path

import structlog
import yaml

from engine import explanations, features
from schemas.therapist import MatchBreakdown, MatchScore

config_path = Path(__file__).resolve().parent.parent / "config" / "weights.yml"
with open(config_path, "r") as f:
    CONFIG_WEIGHTS = yaml.safe_load(f)

log = structlog.get_logger()

_thresholds = CONFIG_WEIGHTS.get("thresholds", {})
MINIMUM_TOTAL_SCORE = float(_thresholds.get("minimum_total_score", 0.30))
RECOMMENDED_SCORE = float(_thresholds.get("recommended_score", 0.70))


def validate_weights(weights):
    """Weights must cover exactly the seven factors and sum to 1.0."""
    missing = set(features.FACTORS) - set(weights)
    unknown = set(weights) - set(features.FACTORS)
    if missing or unknown:
        raise ValueError(f"Invalid weight profile (missing={sorted(missing)}, unknown={sorted(unknown)})")
    if any(w < 0 for w in weights.values()):
        raise ValueError("Weights must be non-negative")
    total = sum(weights.values())
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        raise ValueError(f"Weights must sum to 1.0, got {total}")
    return {k: float(v) for k, v in weights.items()}


class Matcher:
    def __init__(self, client, therapists, weights=None, minimum_score=MINIMUM_TOTAL_SCORE):
        self.client = client
        self.therapists = therapists
        self.weights = validate_weights(weights or self._select_weights())
        self.minimum_score = minimum_score

    def _select_weights(self):
        """Choose the weight profile for this client."""
        return CONFIG_WEIGHTS.get("default")

    def run(self, top_n=None):
        """Score every therapist, drop those whose two-decimal score is under the floor, best first.

        Ties keep roster order.
        """
        if not self.therapists:
            log.warning("Empty therapist roster for matching")
            return []

        scored = [self.score(th) for th in self.therapists]
        kept = [m for m in scored if m.displayed_score >= self.minimum_score]
        kept.sort(key=lambda m: m.total_score, reverse=True)

        if top_n:
            kept = kept[:top_n]

        self._log_specialization_distribution(self.therapists)
        log.info(
            "Matches generated",
            roster=len(self.therapists),
            returned=len(kept),
            filtered_out=len(scored) - len(kept),
        )
        return kept

    def score(self, th) -> MatchScore:
        breakdown = features.build_breakdown(self.client, th)
        return MatchScore(
            therapist_id=th.id,
            total_score=self._calculate_score(breakdown),
            breakdown=MatchBreakdown(**breakdown),
            compatibility_reasons=explanations.compatibility_reasons(self.client, th, breakdown),
            potential_concerns=explanations.potential_concerns(self.client, th, breakdown),
        )

    def _calculate_score(self, breakdown):
        return sum(breakdown[k] * self.weights[k] for k in features.FACTORS)

    def _log_specialization_distribution(self, therapists):
        """Log distribution of specializations across the roster."""
        counter = collections.Counter()
        for th in therapists:
            for spec in th.specializations:
                counter[spec] += 1
        log.debug("Therapist specialization distribution", distribution=dict(counter))


def find_matches(client, therapists, top_n=None):
    """Ranked, explained matches for one client against a roster."""
    return Matcher(client, therapists).run(top_n=top_n)
