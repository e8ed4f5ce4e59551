"""
core/market_selector.py — BetEstimate
======================================
Market selection: pick the strongest side of each market, rank the three by
edge over a no-information baseline, return top + second.

    1X2            edge = p - 1/3
    Over/Under 2.5 edge = p - 1/2
    BTTS           edge = p - 1/2

Ranking is edge descending. Equal edges fall back to a fixed market priority
(1X2 > Over/Under 2.5 > BTTS), so the second pick is deterministic.
Within a market, ties go to the first listed side: 1 > X > 2, Over, Yes.

A top pick with edge < edge_min is flagged note="low-edge-fallback". It is
still returned; suppressing it is the caller's call.

Usage:
    from core.market_selector import predict, format_pick
    pair = predict("Manchester City", "Liverpool", "Premier League")
    format_pick(pair.top)   # "1X2: 1 (54%)"
"""

import math
from dataclasses import asdict, dataclass
from typing import Optional

from core.config import DEFAULT_CONFIG, PredictionConfig
from core.expected_goals import estimate_goals
from core.poisson_model import MarketProbabilities, compute_market_probabilities

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
MARKET_1X2: str = "1X2"
MARKET_TOTALS: str = "Over/Under 2.5"
MARKET_BTTS: str = "BTTS"

# Tie-break order for equal edges, lower index first
MARKET_PRIORITY: tuple[str, ...] = (MARKET_1X2, MARKET_TOTALS, MARKET_BTTS)

BASELINE_3WAY: float = 1.0 / 3.0
BASELINE_2WAY: float = 0.5

LOW_EDGE_NOTE: str = "low-edge-fallback"

# Display tiers on edge percentage points
EDGE_TIER_STRONG: int = 10
EDGE_TIER_MEDIUM: int = 5


@dataclass
class MarketPrediction:
    market: str             # "1X2", "Over/Under 2.5", "BTTS"
    label: str              # "1"/"X"/"2", "Over 2.5"/"Under 2.5", "Yes"/"No"
    probability: float
    edge: float             # probability - baseline
    baseline: float         # 1/3 for three-way, 1/2 for two-way
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PredictionPair:
    top: MarketPrediction
    second: MarketPrediction

    def to_dict(self) -> dict:
        return {"top": self.top.to_dict(), "second": self.second.to_dict()}


def _candidate(market: str, label: str, probability: float, baseline: float) -> MarketPrediction:
    return MarketPrediction(
        market=market,
        label=label,
        probability=probability,
        edge=probability - baseline,
        baseline=baseline,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def market_candidates(probs: MarketProbabilities) -> list[MarketPrediction]:
    """Best side of each market, in MARKET_PRIORITY order (unranked)."""
    # max() keeps the first of equal values → 1 > X > 2
    label_1x2, p_1x2 = max(
        (("1", probs.p_home), ("X", probs.p_draw), ("2", probs.p_away)),
        key=lambda item: item[1],
    )
    if probs.p_over_2_5 >= probs.p_under_2_5:
        totals = _candidate(MARKET_TOTALS, "Over 2.5", probs.p_over_2_5, BASELINE_2WAY)
    else:
        totals = _candidate(MARKET_TOTALS, "Under 2.5", probs.p_under_2_5, BASELINE_2WAY)
    if probs.p_btts_yes >= BASELINE_2WAY:
        btts = _candidate(MARKET_BTTS, "Yes", probs.p_btts_yes, BASELINE_2WAY)
    else:
        btts = _candidate(MARKET_BTTS, "No", probs.p_btts_no, BASELINE_2WAY)

    return [_candidate(MARKET_1X2, label_1x2, p_1x2, BASELINE_3WAY), totals, btts]


def select_predictions(
    lam_home: float,
    lam_away: float,
    config: Optional[PredictionConfig] = None,
) -> PredictionPair:
    """
    Rank the best side of each market by edge and return top + second.

    >>> pair = select_predictions(1.325, 1.325)
    >>> pair.top.note
    'low-edge-fallback'
    >>> pair = select_predictions(3.2, 0.15)
    >>> (pair.top.market, pair.top.label, pair.top.note)
    ('1X2', '1', None)
    """
    cfg = config or DEFAULT_CONFIG
    probs = compute_market_probabilities(lam_home, lam_away, cfg.sharpen_tau)

    candidates = market_candidates(probs)
    candidates.sort(key=lambda c: (-c.edge, MARKET_PRIORITY.index(c.market)))

    top, second = candidates[0], candidates[1]
    if top.edge < cfg.edge_min:
        top.note = LOW_EDGE_NOTE
    return PredictionPair(top=top, second=second)


def predict(
    home: str,
    away: str,
    league: str,
    config: Optional[PredictionConfig] = None,
) -> PredictionPair:
    """
    Full pipeline for one fixture: names + league → top/second picks.

    Pure and deterministic for fixed inputs. Never raises on string input;
    empty names rate as 1500.
    """
    xg = estimate_goals(home, away, league, config)
    return select_predictions(xg.lambda_home, xg.lambda_away, config)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    # halves round up: 62.5 -> 63
    return math.floor(value + 0.5)


def format_pick(prediction: Optional[MarketPrediction]) -> str:
    """
    Human-readable pick label.

    >>> format_pick(MarketPrediction("BTTS", "Yes", 0.584, 0.084, 0.5))
    'BTTS: Yes (58%)'
    >>> format_pick(None)
    ''
    """
    if prediction is None:
        return ""
    return f"{prediction.market}: {prediction.label} ({_round_half_up(prediction.probability * 100)}%)"


def edge_pct(prediction: Optional[MarketPrediction]) -> int:
    """
    Edge in whole percentage points, floored at 0.

    >>> edge_pct(MarketPrediction("1X2", "1", 0.52, 0.1867, 1 / 3))
    19
    >>> edge_pct(MarketPrediction("BTTS", "No", 0.49, -0.01, 0.5))
    0
    """
    if prediction is None:
        return 0
    return _round_half_up(max(0.0, prediction.edge) * 100)


def edge_tier(edge_points: float, has_pick: bool = True) -> str:
    """
    Display tier for a row: strong (>=10), medium (>=5), low, or muted.

    >>> edge_tier(12)
    'strong'
    >>> edge_tier(7)
    'medium'
    >>> edge_tier(2)
    'low'
    >>> edge_tier(20, has_pick=False)
    'muted'
    """
    if not has_pick:
        return "muted"
    if edge_points >= EDGE_TIER_STRONG:
        return "strong"
    if edge_points >= EDGE_TIER_MEDIUM:
        return "medium"
    return "low"
