"""
core/league_baseline.py — BetEstimate
======================================
League goals-per-match baseline. Plain substring matching on the lowercased
competition label against an ORDERED table. First hit wins.

Order matters: labels often carry several tokens (country + competition),
so the table is a priority list, never a dict lookup.

Architecture rule: NO imports from other core modules.
"""

from typing import Optional

DEFAULT_BASELINE: float = 2.65

# (substring, expected combined goals per match), checked top to bottom
LEAGUE_BASELINES: tuple[tuple[str, float], ...] = (
    ("super lig",  2.70),
    ("süper lig",  2.70),
    ("premier",    2.90),
    ("la liga",    2.60),
    ("bundesliga", 3.10),
    ("serie a",    2.50),
    ("ligue 1",    2.75),
    ("eredivisie", 3.00),
    ("primeira",   2.50),
)


def resolve_baseline(league_label: Optional[str]) -> float:
    """
    Expected combined goals per match for a free-text league label.

    >>> resolve_baseline("English Premier League")
    2.9
    >>> resolve_baseline("Germany Bundesliga")
    3.1
    >>> resolve_baseline("Turkish Süper Lig")
    2.7
    >>> resolve_baseline("Obscure Regional Cup")
    2.65
    >>> resolve_baseline("")
    2.65
    """
    label = (league_label or "").lower()
    if not label:
        return DEFAULT_BASELINE

    for pattern, baseline in LEAGUE_BASELINES:
        if pattern in label:
            return baseline

    return DEFAULT_BASELINE
