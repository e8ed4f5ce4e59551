"""
core/team_ratings.py — BetEstimate
===================================
Team strength layer. No live data. Static Elo-like seed ratings for the
clubs that show up most often on the daily schedule.

Lookup chain (resolve_strength):
    1. normalize: lowercase, non-[a-z0-9] runs → single space, strip
    2. alias:     verbose club/federation names → short canonical key
    3. seed:      canonical key in SEED_RATINGS
    4. seed:      un-aliased normalized key in SEED_RATINGS
    5. default:   DEFAULT_RATING (1500)

Tables are built once at import and never mutated.
Architecture rule: NO imports from other core modules.
"""

import re

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_RATING: float = 1500.0

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


# ---------------------------------------------------------------------------
# Aliases — normalized verbose name → canonical key in SEED_RATINGS
# ---------------------------------------------------------------------------
TEAM_ALIASES: dict[str, str] = {
    "paris saint germain":       "psg",
    "paris saint germain fc":    "psg",
    "manchester city fc":        "manchester city",
    "manchester united fc":      "manchester united",
    "fc barcelona":              "barcelona",
    "fc bayern munich":          "bayern munich",
    "fc internazionale milano":  "inter",
    "fc internazionale":         "inter",
    "juventus fc":               "juventus",
    "ac milan":                  "milan",
    "atletico de madrid":        "atletico madrid",
    "ssc napoli":                "napoli",
    "as roma":                   "roma",
    "tottenham hotspur":         "tottenham",
    "fenerbahce istanbul":       "fenerbahce",
    "galatasaray sk":            "galatasaray",
    "besiktas jk":               "besiktas",
}


# ---------------------------------------------------------------------------
# Seed ratings — Elo-like scale, hand-curated
# Elite: 1850+ | Strong: 1750-1850 | Mid: 1620-1750
# ---------------------------------------------------------------------------
SEED_RATINGS: dict[str, float] = {
    # Elite
    "bayern munich":       1900.0,
    "manchester city":     1880.0,
    "psg":                 1850.0,
    "paris saint germain": 1850.0,
    "real madrid":         1850.0,

    # Strong
    "barcelona":           1820.0,
    "liverpool":           1820.0,
    "inter":               1820.0,
    "arsenal":             1800.0,
    "juventus":            1800.0,
    "atletico madrid":     1800.0,
    "milan":               1780.0,
    "napoli":              1780.0,
    "manchester united":   1760.0,
    "tottenham":           1760.0,
    "chelsea":             1750.0,

    # Mid
    "roma":                1740.0,
    "galatasaray":         1700.0,
    "fenerbahce":          1680.0,
    "besiktas":            1650.0,
    "trabzonspor":         1620.0,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_team_name(name: str) -> str:
    """
    Lowercase, collapse non-alphanumeric runs to one space, strip.

    >>> normalize_team_name("  Paris Saint-Germain F.C. ")
    'paris saint germain f c'
    >>> normalize_team_name("")
    ''
    """
    return _NON_ALNUM.sub(" ", (name or "").lower()).strip()


def canonical_key(name: str) -> str:
    """
    Normalized key, swapped for its canonical short form when aliased.

    >>> canonical_key("Paris Saint Germain FC")
    'psg'
    >>> canonical_key("Liverpool")
    'liverpool'
    """
    normalized = normalize_team_name(name)
    return TEAM_ALIASES.get(normalized, normalized)


def resolve_strength(name: str) -> float:
    """
    Return the seed rating for a free-text team name.

    Unknown teams (and the empty string) get DEFAULT_RATING.

    >>> resolve_strength("Manchester City")
    1880.0
    >>> resolve_strength("FC Bayern Munich")
    1900.0
    >>> resolve_strength("Unknown FC")
    1500.0
    """
    key = canonical_key(name)
    if key in SEED_RATINGS:
        return SEED_RATINGS[key]

    normalized = normalize_team_name(name)
    if normalized in SEED_RATINGS:
        return SEED_RATINGS[normalized]

    return DEFAULT_RATING


def list_rated_teams() -> list[str]:
    """Seed-table keys, strongest first."""
    return sorted(SEED_RATINGS, key=lambda k: (-SEED_RATINGS[k], k))
