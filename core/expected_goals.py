"""
core/expected_goals.py — BetEstimate
=====================================
Expected-goals estimator: two seed ratings + league baseline → (λH, λA).

Formula:
    diff  = (rating_home + HOME_ADVANTAGE) - rating_away
    split = clamp(0.5 + 0.12 * tanh(diff / 650), 0.36, 0.64)
    λH    = base * split       * (1 + diff / 2200)
    λA    = base * (1 - split) * (1 - diff / 2200)
    if rating_home - rating_away >= strong_diff_tilt:
        λH *= 1.10, λA *= 0.90
    both clamped to [0.15, 3.2]

The tilt compares raw ratings (no home bonus). The clamp keeps the Poisson
grid sane: no near-zero or runaway scoring rates.

Usage:
    from core.expected_goals import estimate_goals
    xg = estimate_goals("Manchester City", "Liverpool", "Premier League")
    xg.lambda_home, xg.lambda_away
"""

import math
from dataclasses import dataclass
from typing import Optional

from core.config import DEFAULT_CONFIG, PredictionConfig
from core.league_baseline import resolve_baseline
from core.team_ratings import resolve_strength

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
HOME_ADVANTAGE: float = 65.0        # rating points credited to the home side

SPLIT_CENTER: float = 0.5
SPLIT_AMPLITUDE: float = 0.12
SPLIT_SCALE: float = 650.0
SPLIT_MIN: float = 0.36
SPLIT_MAX: float = 0.64

RATE_SCALE: float = 2200.0          # diff → multiplicative scoring tilt

TILT_HOME_FACTOR: float = 1.10
TILT_AWAY_FACTOR: float = 0.90

LAMBDA_MIN: float = 0.15
LAMBDA_MAX: float = 3.2


@dataclass(frozen=True)
class ExpectedGoals:
    lambda_home: float
    lambda_away: float

    @property
    def total(self) -> float:
        return self.lambda_home + self.lambda_away


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def goals_from_ratings(
    rating_home: float,
    rating_away: float,
    baseline: float,
    config: Optional[PredictionConfig] = None,
) -> ExpectedGoals:
    """
    Expected goals for a match given both ratings and the league baseline.

    >>> xg = goals_from_ratings(1500.0, 1500.0, 2.65)
    >>> xg.lambda_home > xg.lambda_away
    True
    >>> xg = goals_from_ratings(5000.0, 1500.0, 3.1)
    >>> (xg.lambda_home, xg.lambda_away)
    (3.2, 0.15)
    """
    cfg = config or DEFAULT_CONFIG

    diff = (rating_home + HOME_ADVANTAGE) - rating_away
    split = _clamp(
        SPLIT_CENTER + SPLIT_AMPLITUDE * math.tanh(diff / SPLIT_SCALE),
        SPLIT_MIN,
        SPLIT_MAX,
    )

    lam_home = baseline * split * (1.0 + diff / RATE_SCALE)
    lam_away = baseline * (1.0 - split) * (1.0 - diff / RATE_SCALE)

    # Big favourite: extra tilt beyond the continuous formula
    if rating_home - rating_away >= cfg.strong_diff_tilt:
        lam_home *= TILT_HOME_FACTOR
        lam_away *= TILT_AWAY_FACTOR

    return ExpectedGoals(
        lambda_home=_clamp(lam_home, LAMBDA_MIN, LAMBDA_MAX),
        lambda_away=_clamp(lam_away, LAMBDA_MIN, LAMBDA_MAX),
    )


def estimate_goals(
    home: str,
    away: str,
    league: str,
    config: Optional[PredictionConfig] = None,
) -> ExpectedGoals:
    """
    Expected goals from free-text team names and league label.

    Total over all strings: unknown teams rate 1500, unknown leagues 2.65.
    """
    return goals_from_ratings(
        resolve_strength(home),
        resolve_strength(away),
        resolve_baseline(league),
        config,
    )
