"""
tests/test_team_ratings.py — BetEstimate
=========================================
Unit tests for core/team_ratings.py.

Coverage:
  - normalize_team_name(): case, punctuation, whitespace, empty
  - canonical_key(): alias hit, alias miss
  - resolve_strength(): seed hit, alias hit, un-aliased fallback, default
  - Architecture: no imports from other core modules
"""

import pytest

from core.team_ratings import (
    DEFAULT_RATING,
    SEED_RATINGS,
    TEAM_ALIASES,
    canonical_key,
    list_rated_teams,
    normalize_team_name,
    resolve_strength,
)


# ---------------------------------------------------------------------------
# normalize_team_name
# ---------------------------------------------------------------------------

class TestNormalizeTeamName:

    def test_lowercases(self):
        assert normalize_team_name("LIVERPOOL") == "liverpool"

    def test_punctuation_runs_become_single_space(self):
        assert normalize_team_name("Paris Saint-Germain F.C.") == "paris saint germain f c"

    def test_strips_outer_whitespace(self):
        assert normalize_team_name("   Arsenal  ") == "arsenal"

    def test_accented_chars_are_separators(self):
        """Non [a-z0-9] characters (incl. accents) collapse to a space."""
        assert normalize_team_name("Beşiktaş JK") == "be ikta jk"

    def test_empty_string(self):
        assert normalize_team_name("") == ""

    def test_only_symbols(self):
        assert normalize_team_name("--- ...") == ""

    def test_deterministic(self):
        assert normalize_team_name("Man. City") == normalize_team_name("Man. City")


# ---------------------------------------------------------------------------
# canonical_key
# ---------------------------------------------------------------------------

class TestCanonicalKey:

    def test_alias_to_short_key(self):
        assert canonical_key("Paris Saint Germain FC") == "psg"

    def test_alias_after_normalization(self):
        assert canonical_key("FC Internazionale Milano") == "inter"
        assert canonical_key("A.C. Milan") == "a c milan"   # not an alias once split

    def test_unaliased_passthrough(self):
        assert canonical_key("Real Madrid") == "real madrid"

    def test_every_alias_target_is_rated(self):
        for alias, target in TEAM_ALIASES.items():
            assert target in SEED_RATINGS, f"{alias} → {target} has no seed rating"


# ---------------------------------------------------------------------------
# resolve_strength
# ---------------------------------------------------------------------------

class TestResolveStrength:

    def test_direct_seed(self):
        assert resolve_strength("Manchester City") == 1880.0
        assert resolve_strength("Liverpool") == 1820.0

    def test_alias_seed(self):
        assert resolve_strength("FC Bayern Munich") == 1900.0
        assert resolve_strength("Galatasaray SK") == 1700.0

    def test_unaliased_seed_key(self):
        """'paris saint germain' is both an alias and a seed key — same value."""
        assert resolve_strength("Paris Saint Germain") == 1850.0

    def test_unknown_defaults(self):
        assert resolve_strength("UnknownTeamX") == DEFAULT_RATING

    def test_empty_defaults(self):
        assert resolve_strength("") == DEFAULT_RATING

    def test_none_defaults(self):
        assert resolve_strength(None) == DEFAULT_RATING

    def test_default_is_1500(self):
        assert DEFAULT_RATING == 1500.0

    @pytest.mark.parametrize("name", ["ARSENAL", " arsenal ", "Arsenal!"])
    def test_case_and_punctuation_insensitive(self, name):
        assert resolve_strength(name) == 1800.0

    def test_ratings_in_elo_range(self):
        for key, rating in SEED_RATINGS.items():
            assert 1500.0 <= rating <= 1950.0, f"{key} rating out of range: {rating}"


class TestListRatedTeams:

    def test_strongest_first(self):
        teams = list_rated_teams()
        assert teams[0] == "bayern munich"
        assert len(teams) == len(SEED_RATINGS)


# ---------------------------------------------------------------------------
# Architecture
# ---------------------------------------------------------------------------

class TestArchitecture:

    def test_no_core_imports(self):
        import inspect
        import core.team_ratings as mod
        source = inspect.getsource(mod)
        assert "from core" not in source
        assert "import core" not in source
