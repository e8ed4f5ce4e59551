"""
core/poisson_model.py — BetEstimate
====================================
Poisson outcome model. Goals for each side are independent Poisson draws with
rates λH / λA. From those rates we derive three markets:

    1X2            double sum over the truncated scoreline grid [0, CAP]²,
                   renormalized, then sharpened (p^τ, renormalized)
    Over/Under 2.5 total goals ~ Poisson(λH + λA); under = P(total <= 2)
    BTTS           1 - (P(H=0) + P(A=0) - P(H=0, A=0))

Sharpening only touches 1X2. The raw Poisson 1X2 is too flat relative to
observed results; p^τ with τ > 1 pushes mass toward the favoured outcome.

Pure Python — no scipy dependency. No I/O.
"""

import math
from dataclasses import dataclass

from core.config import DEFAULT_SHARPEN_TAU

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
GOAL_CAP: int = 12          # omitted tail is negligible for λ <= 3.2
TOTAL_LINE: float = 2.5


@dataclass(frozen=True)
class MarketProbabilities:
    """
    Market probabilities for one match.

    p_home / p_draw / p_away are the SHARPENED 1X2 values and sum to 1.0.
    Totals and BTTS pairs each sum to 1.0.
    """
    p_home: float
    p_draw: float
    p_away: float
    p_over_2_5: float
    p_under_2_5: float
    p_btts_yes: float
    p_btts_no: float


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def poisson_pmf(k: int, lam: float) -> float:
    """
    Poisson probability mass function P(X=k | lambda).
    Returns 0.0 for k < 0 or lambda < 0.

    >>> round(poisson_pmf(0, 1.0), 6)
    0.367879
    >>> poisson_pmf(0, 0.0)
    1.0
    """
    if k < 0 or lam < 0:
        return 0.0
    return math.exp(-lam) * lam ** k / math.factorial(k)


def poisson_cdf(k: int, lam: float) -> float:
    """P(X <= k | lambda) by direct summation."""
    return sum(poisson_pmf(i, lam) for i in range(k + 1))


def probabilities_1x2(
    lam_home: float,
    lam_away: float,
    cap: int = GOAL_CAP,
) -> tuple[float, float, float]:
    """
    Raw (unsharpened) home/draw/away probabilities, renormalized to 1.0.

    >>> h, d, a = probabilities_1x2(1.4, 1.1)
    >>> abs(h + d + a - 1.0) < 1e-12
    True
    >>> h > a
    True
    """
    home_pmf = [poisson_pmf(k, lam_home) for k in range(cap + 1)]
    away_pmf = [poisson_pmf(k, lam_away) for k in range(cap + 1)]

    home_win = 0.0
    draw = 0.0
    away_win = 0.0
    for h in range(cap + 1):
        for a in range(cap + 1):
            p = home_pmf[h] * away_pmf[a]
            if h > a:
                home_win += p
            elif h == a:
                draw += p
            else:
                away_win += p

    total = home_win + draw + away_win or 1.0
    return home_win / total, draw / total, away_win / total


def sharpen_3way(
    p_home: float,
    p_draw: float,
    p_away: float,
    tau: float = DEFAULT_SHARPEN_TAU,
) -> tuple[float, float, float]:
    """
    Raise each probability to tau and renormalize.

    Values are scaled by their maximum first, so the largest term is 1 and
    large tau cannot underflow every term to zero.

    >>> h, d, a = sharpen_3way(0.5, 0.3, 0.2, 1.25)
    >>> h > 0.5
    True
    >>> [round(p, 9) for p in sharpen_3way(0.5, 0.3, 0.2, 1.0)]
    [0.5, 0.3, 0.2]
    """
    m = max(p_home, p_draw, p_away) or 1.0
    a = (p_home / m) ** tau
    b = (p_draw / m) ** tau
    c = (p_away / m) ** tau
    z = a + b + c or 1.0
    return a / z, b / z, c / z


def score_matrix(
    lam_home: float,
    lam_away: float,
    max_goals: int = 7,
) -> list[list[float]]:
    """Joint scoreline probabilities: matrix[h][a] = P(home=h, away=a)."""
    home_pmf = [poisson_pmf(k, lam_home) for k in range(max_goals + 1)]
    away_pmf = [poisson_pmf(k, lam_away) for k in range(max_goals + 1)]
    return [[ph * pa for pa in away_pmf] for ph in home_pmf]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_market_probabilities(
    lam_home: float,
    lam_away: float,
    tau: float = DEFAULT_SHARPEN_TAU,
) -> MarketProbabilities:
    """
    All market probabilities for a match.

    >>> mp = compute_market_probabilities(1.25, 1.25)
    >>> abs(mp.p_under_2_5 - poisson_cdf(2, 2.5)) < 1e-12
    True
    >>> abs(mp.p_btts_yes + mp.p_btts_no - 1.0) < 1e-12
    True
    """
    p_home, p_draw, p_away = sharpen_3way(*probabilities_1x2(lam_home, lam_away), tau)

    total_rate = lam_home + lam_away
    p_under = poisson_cdf(int(TOTAL_LINE), total_rate)

    p_neither_side_blank = 1.0 - (
        math.exp(-lam_home) + math.exp(-lam_away) - math.exp(-total_rate)
    )

    return MarketProbabilities(
        p_home=p_home,
        p_draw=p_draw,
        p_away=p_away,
        p_over_2_5=1.0 - p_under,
        p_under_2_5=p_under,
        p_btts_yes=p_neither_side_blank,
        p_btts_no=1.0 - p_neither_side_blank,
    )
