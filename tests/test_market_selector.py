"""
tests/test_market_selector.py — BetEstimate
============================================
Unit tests for core/market_selector.py.

Coverage:
  - select_predictions(): edges, labels, ranking, tie-breaks, low-edge note
  - predict(): end-to-end contract, determinism, home advantage, config
  - format_pick() / edge_pct() / edge_tier(): display helpers

Run: pytest tests/test_market_selector.py -v
"""

import sys
import os
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.config import PredictionConfig
from core.expected_goals import estimate_goals
from core.market_selector import (
    BASELINE_2WAY,
    BASELINE_3WAY,
    LOW_EDGE_NOTE,
    MARKET_1X2,
    MARKET_BTTS,
    MARKET_TOTALS,
    MarketPrediction,
    PredictionPair,
    edge_pct,
    edge_tier,
    format_pick,
    market_candidates,
    predict,
    select_predictions,
)
from core.poisson_model import MarketProbabilities, compute_market_probabilities

VALID_LABELS = {
    MARKET_1X2: {"1", "X", "2"},
    MARKET_TOTALS: {"Over 2.5", "Under 2.5"},
    MARKET_BTTS: {"Yes", "No"},
}


def _probs(**overrides) -> MarketProbabilities:
    base = dict(
        p_home=0.34, p_draw=0.33, p_away=0.33,
        p_over_2_5=0.5, p_under_2_5=0.5,
        p_btts_yes=0.5, p_btts_no=0.5,
    )
    base.update(overrides)
    return MarketProbabilities(**base)


# ---------------------------------------------------------------------------
# select_predictions
# ---------------------------------------------------------------------------

class TestSelectPredictions:

    def test_returns_pair(self):
        pair = select_predictions(1.6, 1.3)
        assert isinstance(pair, PredictionPair)
        assert isinstance(pair.top, MarketPrediction)
        assert isinstance(pair.second, MarketPrediction)

    def test_top_and_second_are_different_markets(self):
        pair = select_predictions(1.6, 1.3)
        assert pair.top.market != pair.second.market

    def test_top_edge_not_below_second(self):
        for lh, la in [(1.6, 1.3), (2.8, 0.4), (0.3, 0.3), (3.2, 3.2), (0.6, 2.1)]:
            pair = select_predictions(lh, la)
            assert pair.top.edge >= pair.second.edge

    def test_labels_from_fixed_vocabulary(self):
        for lh, la in [(1.6, 1.3), (2.8, 0.4), (0.3, 0.3), (3.2, 3.2), (0.6, 2.1)]:
            pair = select_predictions(lh, la)
            for pick in (pair.top, pair.second):
                assert pick.label in VALID_LABELS[pick.market]

    def test_edges_use_market_baselines(self):
        pair = select_predictions(2.5, 0.5)
        for pick in (pair.top, pair.second):
            expected = BASELINE_3WAY if pick.market == MARKET_1X2 else BASELINE_2WAY
            assert pick.baseline == expected
            assert pick.edge == pytest.approx(pick.probability - expected)

    def test_heavy_favourite_picks_home(self):
        pair = select_predictions(3.2, 0.15)
        assert pair.top.market == MARKET_1X2
        assert pair.top.label == "1"
        assert pair.top.note is None

    def test_heavy_away_favourite_picks_away(self):
        pair = select_predictions(0.15, 3.2)
        assert pair.top.market == MARKET_1X2
        assert pair.top.label == "2"

    def test_low_scoring_prefers_under_and_no(self):
        pair = select_predictions(0.3, 0.3)
        picks = {p.market: p.label for p in (pair.top, pair.second)}
        assert picks.get(MARKET_TOTALS, "Under 2.5") == "Under 2.5"
        assert picks.get(MARKET_BTTS, "No") == "No"

    def test_high_scoring_prefers_over(self):
        probs = compute_market_probabilities(3.2, 3.2)
        assert probs.p_over_2_5 > 0.9
        pair = select_predictions(3.2, 3.2)
        labels = {p.label for p in (pair.top, pair.second)}
        assert "Over 2.5" in labels or "Yes" in labels

    def test_balanced_match_flags_low_edge(self):
        """λH=λA=1.325 → no market separates; top edge < 0.08."""
        pair = select_predictions(1.325, 1.325)
        assert pair.top.edge < 0.08
        assert pair.top.note == LOW_EDGE_NOTE

    def test_second_never_carries_note(self):
        pair = select_predictions(1.325, 1.325)
        assert pair.second.note is None

    def test_edge_min_config(self):
        strict = select_predictions(2.0, 1.0, PredictionConfig(edge_min=0.99))
        lax = select_predictions(2.0, 1.0, PredictionConfig(edge_min=0.0))
        assert strict.top.note == LOW_EDGE_NOTE
        assert lax.top.note is None

    def test_sharpen_tau_config_changes_1x2_probability(self):
        soft = select_predictions(3.2, 0.15, PredictionConfig(sharpen_tau=1.0))
        sharp = select_predictions(3.2, 0.15, PredictionConfig(sharpen_tau=2.0))
        assert sharp.top.probability > soft.top.probability


class TestTieBreaks:

    def test_equal_edges_follow_market_priority(self):
        """Totals and BTTS both at edge 0.05 → Over/Under ranks before BTTS."""
        probs = _probs(p_over_2_5=0.55, p_under_2_5=0.45, p_btts_yes=0.55, p_btts_no=0.45)
        with patch("core.market_selector.compute_market_probabilities", return_value=probs):
            pair = select_predictions(1.0, 1.0)
        assert pair.top.market == MARKET_TOTALS
        assert pair.second.market == MARKET_BTTS
        assert pair.top.edge == pair.second.edge

    def test_uniform_1x2_ties_totals_at_zero_edge(self):
        """All three edges 0 → order is exactly the market priority."""
        third = 1.0 / 3.0
        probs = _probs(p_home=third, p_draw=third, p_away=third)
        with patch("core.market_selector.compute_market_probabilities", return_value=probs):
            pair = select_predictions(1.0, 1.0)
        assert pair.top.market == MARKET_1X2
        assert pair.second.market == MARKET_TOTALS
        assert pair.top.note == LOW_EDGE_NOTE

    def test_home_away_tie_picks_home(self):
        probs = _probs(p_home=0.4, p_draw=0.2, p_away=0.4)
        with patch("core.market_selector.compute_market_probabilities", return_value=probs):
            pair = select_predictions(1.0, 1.0)
        assert pair.top.market == MARKET_1X2
        assert pair.top.label == "1"

    def test_draw_away_tie_picks_draw(self):
        candidates = market_candidates(_probs(p_home=0.2, p_draw=0.4, p_away=0.4))
        assert candidates[0].label == "X"

    def test_even_totals_picks_over(self):
        candidates = market_candidates(_probs())
        assert candidates[1].market == MARKET_TOTALS
        assert candidates[1].label == "Over 2.5"
        assert candidates[1].edge == 0.0

    def test_even_btts_picks_yes(self):
        candidates = market_candidates(_probs())
        assert candidates[2].market == MARKET_BTTS
        assert candidates[2].label == "Yes"

    def test_candidates_in_priority_order(self):
        markets = [c.market for c in market_candidates(_probs(p_over_2_5=0.3, p_under_2_5=0.7))]
        assert markets == [MARKET_1X2, MARKET_TOTALS, MARKET_BTTS]


# ---------------------------------------------------------------------------
# predict
# ---------------------------------------------------------------------------

class TestPredict:

    def test_deterministic(self):
        a = predict("Manchester City", "Liverpool", "Premier League")
        b = predict("Manchester City", "Liverpool", "Premier League")
        assert a.to_dict() == b.to_dict()

    def test_matches_pipeline(self):
        xg = estimate_goals("Arsenal", "Chelsea", "Premier League")
        direct = select_predictions(xg.lambda_home, xg.lambda_away)
        assert predict("Arsenal", "Chelsea", "Premier League").to_dict() == direct.to_dict()

    def test_empty_names_still_predict(self):
        pair = predict("", "", "")
        assert pair.top is not None
        assert pair.second is not None

    def test_equal_strength_favours_home(self):
        xg = estimate_goals("Unknown A", "Unknown B", "")
        probs = compute_market_probabilities(xg.lambda_home, xg.lambda_away)
        assert probs.p_home > probs.p_away

    def test_swap_is_not_symmetric(self):
        """Home advantage: City at home beats City away."""
        home = estimate_goals("Manchester City", "Liverpool", "Premier League")
        away = estimate_goals("Liverpool", "Manchester City", "Premier League")
        p_city_home = compute_market_probabilities(home.lambda_home, home.lambda_away).p_home
        p_city_away = compute_market_probabilities(away.lambda_home, away.lambda_away).p_away
        assert p_city_home > p_city_away

    def test_to_dict_shape(self):
        d = predict("Bayern Munich", "Fenerbahce", "Champions League").to_dict()
        assert set(d) == {"top", "second"}
        assert set(d["top"]) == {"market", "label", "probability", "edge", "baseline", "note"}


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

class TestFormatPick:

    def test_rounds_percentage(self):
        pick = MarketPrediction(MARKET_1X2, "1", 0.537, 0.2037, BASELINE_3WAY)
        assert format_pick(pick) == "1X2: 1 (54%)"

    def test_totals(self):
        pick = MarketPrediction(MARKET_TOTALS, "Under 2.5", 0.62, 0.12, BASELINE_2WAY)
        assert format_pick(pick) == "Over/Under 2.5: Under 2.5 (62%)"

    def test_none(self):
        assert format_pick(None) == ""

    @pytest.mark.parametrize("probability,shown", [(0.625, "63%"), (0.125, "13%"), (0.5, "50%")])
    def test_half_rounds_up(self, probability, shown):
        pick = MarketPrediction(MARKET_BTTS, "Yes", probability, probability - 0.5, BASELINE_2WAY)
        assert format_pick(pick).endswith(f"({shown})")


class TestEdgePct:

    def test_positive(self):
        assert edge_pct(MarketPrediction(MARKET_BTTS, "Yes", 0.62, 0.12, 0.5)) == 12

    def test_negative_floors_at_zero(self):
        assert edge_pct(MarketPrediction(MARKET_BTTS, "Yes", 0.48, -0.02, 0.5)) == 0

    def test_none(self):
        assert edge_pct(None) == 0

    def test_half_rounds_up(self):
        assert edge_pct(MarketPrediction(MARKET_BTTS, "Yes", 0.625, 0.125, 0.5)) == 13
        assert edge_pct(MarketPrediction(MARKET_1X2, "1", 0.7083, 0.375, BASELINE_3WAY)) == 38


class TestEdgeTier:

    @pytest.mark.parametrize("points,tier", [(15, "strong"), (10, "strong"), (9, "medium"),
                                              (5, "medium"), (4, "low"), (0, "low")])
    def test_tiers(self, points, tier):
        assert edge_tier(points) == tier

    def test_no_pick_is_muted(self):
        assert edge_tier(25, has_pick=False) == "muted"
