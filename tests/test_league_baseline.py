"""
tests/test_league_baseline.py — BetEstimate
============================================
Unit tests for core/league_baseline.py.

Run: pytest tests/test_league_baseline.py -v
"""

import pytest

from core.league_baseline import DEFAULT_BASELINE, LEAGUE_BASELINES, resolve_baseline


class TestResolveBaseline:

    @pytest.mark.parametrize("label,expected", [
        ("English Premier League", 2.9),
        ("Spain LaLiga", 2.65),             # no space → no match
        ("Spain La Liga", 2.6),
        ("Germany Bundesliga", 3.1),
        ("Italy Serie A", 2.5),
        ("France Ligue 1", 2.75),
        ("Netherlands Eredivisie", 3.0),
        ("Portugal Primeira Liga", 2.5),
        ("Turkey Super Lig", 2.7),
        ("Türkiye Süper Lig", 2.7),
    ])
    def test_known_leagues(self, label, expected):
        assert resolve_baseline(label) == pytest.approx(expected)

    def test_case_insensitive(self):
        assert resolve_baseline("BUNDESLIGA") == 3.1

    def test_unknown_defaults(self):
        assert resolve_baseline("Obscure Regional Cup") == DEFAULT_BASELINE

    def test_empty_defaults(self):
        assert resolve_baseline("") == 2.65

    def test_none_defaults(self):
        assert resolve_baseline(None) == 2.65

    def test_first_match_wins(self):
        """'Premier' is listed before 'bundesliga' — a label with both takes 2.9."""
        assert resolve_baseline("Premier Bundesliga Invitational") == 2.9

    def test_super_lig_beats_premier(self):
        assert resolve_baseline("Super Lig Premier Cup") == 2.7

    def test_table_is_ordered_sequence(self):
        assert isinstance(LEAGUE_BASELINES, tuple)
        assert LEAGUE_BASELINES[0][0] == "super lig"
        patterns = [p for p, _ in LEAGUE_BASELINES]
        assert patterns.index("premier") < patterns.index("bundesliga")
